import pytest


@pytest.fixture
def category(api):
    return api.post("/api/v1/categories", json={"name": "Teak"}).json()


def create(api, name, category_id):
    return api.post("/api/v1/subcategories", json={"name": name, "category_id": category_id})


def test_create_sub_category(api, category):
    response = create(api, "Teak Quarter", category["id"])
    assert response.status_code == 201
    body = response.json()
    assert body["category_id"] == category["id"]
    assert body["category"] == {"id": category["id"], "name": "Teak"}
    assert body["products_count"] == 0


def test_create_under_missing_category_is_not_found(api, db):
    response = create(api, "Orphan", 999)
    assert response.status_code == 404
    assert response.json()["kind"] == "not_found"
    assert api.get("/api/v1/subcategories").json() == []


def test_duplicate_name_within_category_is_conflict(api, category):
    create(api, "Teak Quarter", category["id"])
    response = create(api, "teak quarter", category["id"])
    assert response.status_code == 409


def test_same_name_in_other_category_is_allowed(api, category):
    oak = api.post("/api/v1/categories", json={"name": "Oak"}).json()
    create(api, "Quarter", category["id"])
    assert create(api, "Quarter", oak["id"]).status_code == 201


def test_list_scoped_by_category_and_search(api, category):
    oak = api.post("/api/v1/categories", json={"name": "Oak"}).json()
    create(api, "Teak Quarter", category["id"])
    create(api, "Teak Crown", category["id"])
    create(api, "Oak Quarter", oak["id"])

    teak_only = api.get("/api/v1/subcategories", params={"category_id": category["id"]}).json()
    assert [sc["name"] for sc in teak_only] == ["Teak Crown", "Teak Quarter"]

    quarters = api.get("/api/v1/subcategories", params={"search": "quarter"}).json()
    assert [sc["name"] for sc in quarters] == ["Oak Quarter", "Teak Quarter"]


def test_products_count_is_recomputed_on_read(api, category):
    sub_category = create(api, "Teak Quarter", category["id"]).json()
    for i in range(3):
        api.post("/api/v1/products", json={
            "name": f"TQ-00{i}", "sub_category_id": sub_category["id"],
            "qty": 1, "price": 1, "billing": 1,
        })

    assert api.get(f"/api/v1/subcategories/{sub_category['id']}").json()["products_count"] == 3
    listed = api.get("/api/v1/subcategories").json()
    assert listed[0]["products_count"] == 3


def test_rename_sub_category(api, category):
    sub_category = create(api, "Teak Quarter", category["id"]).json()
    response = api.put(f"/api/v1/subcategories/{sub_category['id']}", json={"name": "Teak Q"})
    assert response.status_code == 200
    assert response.json()["name"] == "Teak Q"


def test_rename_to_sibling_name_is_conflict(api, category):
    create(api, "Teak Quarter", category["id"])
    crown = create(api, "Teak Crown", category["id"]).json()
    response = api.put(f"/api/v1/subcategories/{crown['id']}", json={"name": "TEAK QUARTER"})
    assert response.status_code == 409


def test_update_cannot_move_to_other_category(api, category):
    sub_category = create(api, "Teak Quarter", category["id"]).json()
    response = api.put(
        f"/api/v1/subcategories/{sub_category['id']}",
        json={"name": "Teak Quarter", "category_id": category["id"]},
    )
    assert response.status_code == 400


def test_get_missing_sub_category_is_not_found(api):
    assert api.get("/api/v1/subcategories/5").status_code == 404


@pytest.mark.parametrize("category_id", ["1", 1.5, True])
def test_mistyped_category_id_is_not_coerced(api, category, category_id):
    response = api.post("/api/v1/subcategories", json={"name": "Teak Quarter", "category_id": category_id})
    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "category_id"
