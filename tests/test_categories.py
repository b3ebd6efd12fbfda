import pytest


def create(api, name):
    return api.post("/api/v1/categories", json={"name": name})


def test_create_and_get_category(api):
    response = create(api, "Teak")
    assert response.status_code == 201
    body = response.json()
    assert body["name"] == "Teak"
    assert body["sub_categories_count"] == 0

    fetched = api.get(f"/api/v1/categories/{body['id']}")
    assert fetched.status_code == 200
    assert fetched.json()["name"] == "Teak"


def test_name_is_trimmed(api):
    assert create(api, "  Oak  ").json()["name"] == "Oak"


def test_duplicate_name_is_conflict_case_insensitive(api):
    create(api, "Teak")
    response = create(api, "tEAK")
    assert response.status_code == 409
    assert response.json()["kind"] == "conflict"
    assert len(api.get("/api/v1/categories").json()) == 1


@pytest.mark.parametrize("payload", [
    {"name": ""},
    {"name": "   "},
    {"name": "x" * 101},
    {},
    {"name": "Teak", "color": "brown"},
])
def test_invalid_payload_is_validation_error(api, payload):
    response = api.post("/api/v1/categories", json=payload)
    assert response.status_code == 400
    body = response.json()
    assert body["kind"] == "validation_error"
    assert body["errors"]


def test_name_of_max_length_is_accepted(api):
    assert create(api, "x" * 100).status_code == 201


def test_get_missing_category_is_not_found(api):
    response = api.get("/api/v1/categories/999")
    assert response.status_code == 404
    assert response.json() == {"kind": "not_found", "detail": "Category not found"}


def test_list_sorted_by_name_with_search(api):
    for name in ["Walnut", "Teak", "Oak", "Rosewood"]:
        create(api, name)

    names = [c["name"] for c in api.get("/api/v1/categories").json()]
    assert names == ["Oak", "Rosewood", "Teak", "Walnut"]

    found = api.get("/api/v1/categories", params={"search": "OO"}).json()
    assert [c["name"] for c in found] == ["Rosewood"]


def test_search_matches_wildcards_literally(api):
    create(api, "Teak")
    create(api, "Teak_50%")
    found = api.get("/api/v1/categories", params={"search": "_50%"}).json()
    assert [c["name"] for c in found] == ["Teak_50%"]


def test_sub_categories_count_is_recomputed_on_read(api):
    category = create(api, "Teak").json()
    for name in ["Teak Quarter", "Teak Crown"]:
        api.post("/api/v1/subcategories", json={"name": name, "category_id": category["id"]})

    assert api.get(f"/api/v1/categories/{category['id']}").json()["sub_categories_count"] == 2
    listed = api.get("/api/v1/categories").json()
    assert listed[0]["sub_categories_count"] == 2

    crown = api.get("/api/v1/subcategories", params={"search": "Crown"}).json()[0]
    api.delete(f"/api/v1/subcategories/{crown['id']}")
    assert api.get(f"/api/v1/categories/{category['id']}").json()["sub_categories_count"] == 1


def test_rename_category(api):
    category = create(api, "Teak").json()
    response = api.put(f"/api/v1/categories/{category['id']}", json={"name": "Burma Teak"})
    assert response.status_code == 200
    assert response.json()["name"] == "Burma Teak"


def test_rename_to_own_name_in_other_case_is_allowed(api):
    category = create(api, "Teak").json()
    response = api.put(f"/api/v1/categories/{category['id']}", json={"name": "TEAK"})
    assert response.status_code == 200


def test_rename_to_existing_name_is_conflict(api):
    create(api, "Teak")
    oak = create(api, "Oak").json()
    response = api.put(f"/api/v1/categories/{oak['id']}", json={"name": "teak"})
    assert response.status_code == 409


def test_rename_missing_category_is_not_found(api):
    assert api.put("/api/v1/categories/42", json={"name": "Teak"}).status_code == 404


def test_non_integer_id_is_validation_error(api):
    response = api.get("/api/v1/categories/abc")
    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "path.category_id"


@pytest.mark.parametrize("name", [42, True, ["Teak"]])
def test_non_string_name_is_not_coerced(api, name):
    response = api.post("/api/v1/categories", json={"name": name})
    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "name"
    assert api.get("/api/v1/categories").json() == []
