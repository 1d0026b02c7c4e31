from transformations.services import (
    CATALOG,
    PROMPTS,
    TransformationType,
    get_prompt,
    list_transformations,
)

EXPECTED_ORDER = [
    "avatar",
    "age_progression",
    "age_regression",
    "pet_generator",
    "couple_generator",
    "style_anime",
    "style_painting",
    "style_cartoon",
    "baby_blur",
]


def test_every_transformation_has_a_prompt():
    assert set(PROMPTS) == set(TransformationType)
    for transformation in TransformationType:
        assert get_prompt(transformation.value) == PROMPTS[transformation]


def test_unknown_transformation_falls_back_to_avatar():
    assert get_prompt("time_travel") == PROMPTS[TransformationType.AVATAR]
    assert get_prompt("") == PROMPTS[TransformationType.AVATAR]


def test_catalog_order_and_fields():
    entries = list_transformations()
    assert [entry["id"] for entry in entries] == EXPECTED_ORDER
    for entry in entries:
        assert set(entry) == {"id", "name", "description", "icon", "category"}


def test_catalog_copy_does_not_mutate_source():
    entries = list_transformations()
    entries[0]["name"] = "changed"
    assert CATALOG[0]["name"] == "Avatar Pixar"


def test_transformations_endpoint_is_stable(client):
    first = client.get("/transformations")
    second = client.get("/transformations")

    assert first.status_code == 200
    assert first.json() == second.json()

    body = first.json()
    assert body["success"] is True
    assert body["data"]["totalCount"] == 9
    assert [t["id"] for t in body["data"]["transformations"]] == EXPECTED_ORDER
    assert body["data"]["transformations"][-1]["name"] == "Family Photo"
