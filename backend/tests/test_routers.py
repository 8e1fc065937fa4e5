"""
Tests for the REST endpoints.
"""

import json


class TestCourseEndpoints:

    def test_list_envelope(self, client, seed_courses):
        response = client.get("/api/courses", params={"limit": 2})
        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 3
        assert body["page"] == 1
        assert body["limit"] == 2
        assert body["totalPages"] == 2
        assert body["hasNext"] is True
        assert body["hasPrev"] is False
        assert [item["slug"] for item in body["data"]] == ["salsa-basics", "bachata-flow"]

    def test_list_filter_sort_locale(self, client, seed_courses):
        response = client.get(
            "/api/courses",
            params={
                "filter": json.dumps({"field": "level", "operator": "ne", "value": "advanced"}),
                "sort": "-duration",
                "locale": "fr",
            },
        )
        assert response.status_code == 200
        data = response.json()["data"]
        assert [item["slug"] for item in data] == ["salsa-basics", "bachata-flow"]
        assert [item["translation"]["locale"] for item in data] == ["fr", "en"]

    def test_list_with_relations(self, client, seed_courses):
        response = client.get("/api/courses", params={"with": "instructor,danceStyle", "sort": "slug"})
        assert response.status_code == 400
        assert "danceStyle" in response.json()["detail"]

        response = client.get("/api/courses", params={"with": "instructor,dance_style", "sort": "slug"})
        assert response.status_code == 200
        salsa = response.json()["data"][1]
        assert salsa["instructor"]["name"] == "Maria Lopez"
        assert salsa["danceStyle"]["slug"] == "salsa"
        assert "lessons" not in salsa

    def test_list_free_text_search(self, client, seed_courses):
        response = client.get("/api/courses", params={"filter": "bachata"})
        assert response.status_code == 200
        assert [item["slug"] for item in response.json()["data"]] == ["bachata-flow"]

    def test_list_numeric_search_term(self, client, seed_courses):
        response = client.get("/api/courses", params={"filter": "2024"})
        assert response.status_code == 200
        assert response.json()["total"] == 0

    def test_unknown_filter_field(self, client, seed_courses):
        response = client.get(
            "/api/courses",
            params={"filter": json.dumps({"field": "nonexistentField", "value": 1})},
        )
        assert response.status_code == 400
        assert "nonexistentField" in response.json()["detail"]

    def test_invalid_limit(self, client):
        response = client.get("/api/courses", params={"limit": 500})
        assert response.status_code == 400
        assert "limit" in response.json()["detail"]

    def test_get_with_locale_fallback(self, client, seed_courses):
        course_id = seed_courses["bachata"].id
        response = client.get(f"/api/courses/{course_id}", params={"locale": "fr"})
        assert response.status_code == 200
        assert response.json()["translation"]["name"] == "Bachata Flow"

    def test_get_all_translations(self, client, seed_courses):
        response = client.get(
            f"/api/courses/{seed_courses['salsa'].id}",
            params={"includeAllTranslations": "true", "with": "lessons"},
        )
        body = response.json()
        assert sorted(body["translations"]) == ["en", "fr"]
        assert len(body["lessons"]) == 2

    def test_get_missing(self, client):
        response = client.get("/api/courses/999")
        assert response.status_code == 404
        assert response.json()["detail"] == "Course with ID 999 not found"

    def test_create_update_delete(self, client, seed_instructor):
        response = client.post(
            "/api/courses",
            json={
                "slug": "zouk-intro",
                "level": "beginner",
                "instructorId": seed_instructor.id,
                "translations": [{"locale": "en", "name": "Zouk Intro"}],
            },
        )
        assert response.status_code == 201
        created = response.json()
        assert created["instructorId"] == seed_instructor.id
        assert created["translation"]["name"] == "Zouk Intro"

        response = client.patch(
            f"/api/courses/{created['id']}",
            json={"level": "intermediate", "translations": [{"locale": "es", "name": "Zouk inicial"}]},
        )
        assert response.status_code == 200
        assert response.json()["level"] == "intermediate"
        assert sorted(response.json()["translations"]) == ["en", "es"]

        response = client.delete(f"/api/courses/{created['id']}/translations/es")
        assert response.status_code == 204
        response = client.delete(f"/api/courses/{created['id']}/translations/es")
        assert response.status_code == 404

        response = client.delete(f"/api/courses/{created['id']}")
        assert response.status_code == 204
        assert client.get(f"/api/courses/{created['id']}").status_code == 404

    def test_create_validation(self, client):
        response = client.post("/api/courses", json={"slug": "x", "level": "expert"})
        assert response.status_code == 422

    def test_list_reflects_update(self, client, seed_courses, cache):
        params = {"filter": json.dumps({"field": "level", "value": "beginner"})}
        assert client.get("/api/courses", params=params).json()["total"] == 1
        assert cache.keys("course:paginated:*")

        client.patch(f"/api/courses/{seed_courses['bachata'].id}", json={"level": "beginner"})

        assert client.get("/api/courses", params=params).json()["total"] == 2

    def test_rejects_non_json_body(self, client):
        response = client.post(
            "/api/courses", content="slug=x", headers={"Content-Type": "text/plain"}
        )
        assert response.status_code == 415


class TestOtherEndpoints:

    def test_dance_styles(self, client, seed_dance_style, seed_courses):
        response = client.get(
            f"/api/dance-styles/{seed_dance_style.id}",
            params={"locale": "es", "with": "courses"},
        )
        assert response.status_code == 200
        body = response.json()
        assert body["translation"]["name"] == "Salsa cubana"
        assert [course["slug"] for course in body["courses"]] == ["salsa-basics"]

    def test_lessons_filtered_by_course(self, client, seed_courses):
        response = client.get(
            "/api/lessons",
            params={"filter": json.dumps({"field": "courseId", "value": seed_courses["salsa"].id}), "sort": "-position"},
        )
        assert [item["position"] for item in response.json()["data"]] == [2, 1]

    def test_music_nested_relations(self, client, seed_music):
        response = client.get(
            "/api/artists",
            params={"with": json.dumps([{"albums": ["songs"]}]), "sort": "name"},
        )
        assert response.status_code == 200
        celia = response.json()["data"][0]
        assert celia["albums"][0]["title"] == "Azucar"
        assert len(celia["albums"][0]["songs"]) == 2

    def test_songs_between_filter(self, client, seed_music):
        response = client.get(
            "/api/songs",
            params={"filter": json.dumps({"field": "duration", "operator": "between", "value": [200, 250]})},
        )
        assert [item["title"] for item in response.json()["data"]] == ["Guantanamera"]

    def test_album_create_and_artist_listing_refresh(self, client, seed_music):
        artist_id = seed_music["other"].id
        params = {"with": "albums", "filter": json.dumps({"field": "id", "value": artist_id})}
        assert client.get("/api/artists", params=params).json()["data"][0]["albums"] == []

        response = client.post("/api/albums", json={"artistId": artist_id, "title": "Formula Vol. 1"})
        assert response.status_code == 201

        albums = client.get("/api/artists", params=params).json()["data"][0]["albums"]
        assert [album["title"] for album in albums] == ["Formula Vol. 1"]

    def test_venues(self, client, seed_venue):
        response = client.get("/api/venues", params={"filter": "new york", "with": "owner"})
        assert response.status_code == 200
        venue = response.json()["data"][0]
        assert venue["hasParking"] is False
        assert venue["owner"]["email"] == "maria@example.com"

    def test_users(self, client):
        response = client.post("/api/users", json={"email": "Leo@Example.com", "name": "Leo"})
        assert response.status_code == 201
        assert response.json()["email"] == "leo@example.com"

        response = client.post("/api/users", json={"email": "leo@example.com", "name": "Leo 2"})
        assert response.status_code == 400
