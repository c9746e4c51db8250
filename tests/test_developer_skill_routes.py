"""HTTP tests for the developer and skill endpoints."""


def skill_names(developer):
    return sorted(link["skill"]["name"] for link in developer["skills"])


class TestDevelopers:
    def test_create_and_fetch(self, client):
        response = client.post(
            "/api/developers",
            json={"name": "Alice", "email": "alice@example.com", "skills": ["Frontend", "UI/UX"]},
        )
        assert response.status_code == 201
        created = response.json()
        assert skill_names(created) == ["Frontend", "UI/UX"]
        assert created["tasks"] == []

        fetched = client.get(f"/api/developers/{created['id']}").json()
        assert fetched["email"] == "alice@example.com"
        assert skill_names(fetched) == ["Frontend", "UI/UX"]

    def test_create_without_skills(self, client):
        created = client.post("/api/developers", json={"name": "Dave", "email": "dave@example.com"}).json()

        assert created["skills"] == []

    def test_update_replaces_skills(self, client):
        created = client.post(
            "/api/developers",
            json={"name": "Bob", "email": "bob@example.com", "skills": ["Backend"]},
        ).json()

        response = client.put(f"/api/developers/{created['id']}", json={"name": "Robert", "skills": ["Database"]})

        assert response.status_code == 200
        body = response.json()
        assert body["name"] == "Robert"
        assert body["email"] == "bob@example.com"
        assert skill_names(body) == ["Database"]

    def test_update_without_skills_keeps_them(self, client):
        created = client.post(
            "/api/developers",
            json={"name": "Bob", "email": "bob@example.com", "skills": ["Backend"]},
        ).json()

        body = client.put(f"/api/developers/{created['id']}", json={"email": "rob@example.com"}).json()

        assert body["email"] == "rob@example.com"
        assert skill_names(body) == ["Backend"]

    def test_lists_assigned_tasks(self, client):
        developer = client.post(
            "/api/developers",
            json={"name": "Carol", "email": "carol@example.com", "skills": ["Frontend", "Backend"]},
        ).json()
        task = client.post("/api/tasks/create", json={"title": "Page", "skills": ["Frontend"]}).json()
        client.put(f"/api/tasks/update/{task['id']}", json={"developerId": developer["id"]})

        developers = client.get("/api/developers").json()

        assert [d["name"] for d in developers] == ["Carol"]
        assigned = developers[0]["tasks"]
        assert [t["title"] for t in assigned] == ["Page"]
        assert assigned[0]["skills"][0]["skill"]["name"] == "Frontend"

    def test_duplicate_email_is_500(self, client):
        client.post("/api/developers", json={"name": "A", "email": "same@example.com"})

        response = client.post("/api/developers", json={"name": "B", "email": "same@example.com"})

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to create developer"}

    def test_missing_developer_is_404(self, client):
        assert client.get("/api/developers/nope").json() == {"error": "Developer not found"}
        assert client.put("/api/developers/nope", json={"name": "x"}).status_code == 404


class TestSkills:
    def test_skills_are_created_on_first_reference(self, client):
        assert client.get("/api/skills").json() == []

        client.post("/api/tasks/create", json={"title": "T", "skills": ["Backend", "Frontend"]})
        client.post("/api/developers", json={"name": "D", "email": "d@example.com", "skills": ["Backend"]})

        skills = client.get("/api/skills").json()
        assert [s["name"] for s in skills] == ["Backend", "Frontend"]

    def test_skill_lists_its_tasks(self, client):
        task = client.post("/api/tasks/create", json={"title": "T", "skills": ["Backend"]}).json()
        skill_id = task["skills"][0]["skillId"]

        skill = client.get(f"/api/skills/{skill_id}").json()

        assert skill["name"] == "Backend"
        assert [link["task"]["title"] for link in skill["tasks"]] == ["T"]
        assert skill["tasks"][0]["taskId"] == task["id"]

    def test_missing_skill_is_404(self, client):
        response = client.get("/api/skills/nope")

        assert response.status_code == 404
        assert response.json() == {"error": "Skill not found"}
