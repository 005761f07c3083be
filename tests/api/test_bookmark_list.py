"""Tests for GET /bookmarks filtering, scoping and sorting."""
from collections.abc import Callable
from datetime import datetime, timedelta

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import Settings
from models.bookmark import Bookmark
from models.folder import Folder

BASE_TIME = datetime(2024, 5, 1, 12, 0, 0)


@pytest.fixture
async def folders(db_session: AsyncSession) -> tuple[Folder, Folder]:
    """Two folders: Work and Reading."""
    work = Folder(name="Work")
    reading = Folder(name="Reading")
    db_session.add_all([work, reading])
    await db_session.flush()
    return work, reading


@pytest.fixture
async def bookmarks(
    db_session: AsyncSession,
    folders: tuple[Folder, Folder],
) -> dict[str, Bookmark]:
    """
    Bookmarks with known timestamps, oldest first.

    alpha (Work) < bravo (unsorted) < charlie (Reading) < delta (Work) < echo (unsorted)
    """
    work, reading = folders
    specs = [
        ("alpha", "https://alpha.example.com/", "Alpha guide", work.id),
        ("bravo", "https://bravo.example.org/", "Bravo notes", None),
        ("charlie", "https://charlie.example.com/docs", "Charlie docs", reading.id),
        ("delta", "https://delta.example.org/guide", "Delta guide", work.id),
        ("echo", "https://echo.example.com/", "Echo", None),
    ]
    created = {}
    for offset, (key, url, name, folder_id) in enumerate(specs):
        bookmark = Bookmark(
            url=url,
            name=name,
            folder_id=folder_id,
            bookmarked_at=BASE_TIME + timedelta(minutes=offset),
        )
        db_session.add(bookmark)
        created[key] = bookmark
    await db_session.flush()
    return created


def _names(response_json: list[dict]) -> list[str]:
    return [b["name"] for b in response_json]


async def test__list_bookmarks__no_params_returns_all_newest_first(
    client: AsyncClient,
    bookmarks: dict[str, Bookmark],
) -> None:
    response = await client.get("/bookmarks")
    assert response.status_code == 200
    assert response.headers["content-type"] == "application/json"
    assert _names(response.json()) == [
        "Echo", "Delta guide", "Charlie docs", "Bravo notes", "Alpha guide",
    ]


async def test__list_bookmarks__empty_store_returns_empty_array(client: AsyncClient) -> None:
    response = await client.get("/bookmarks")
    assert response.status_code == 200
    assert response.json() == []


async def test__list_bookmarks__unsorted_only(
    client: AsyncClient,
    bookmarks: dict[str, Bookmark],
) -> None:
    response = await client.get("/bookmarks", params={"unsorted": "true"})
    assert _names(response.json()) == ["Echo", "Bravo notes"]


async def test__list_bookmarks__unsorted_overrides_folder_id(
    client: AsyncClient,
    folders: tuple[Folder, Folder],
    bookmarks: dict[str, Bookmark],
) -> None:
    """unsorted=true wins even when folder_id is also given."""
    work, _ = folders
    response = await client.get(
        "/bookmarks", params={"unsorted": "true", "folder_id": work.id},
    )
    data = response.json()
    assert all(b["folder_id"] is None for b in data)
    assert _names(data) == ["Echo", "Bravo notes"]


async def test__list_bookmarks__unsorted_false_is_ignored(
    client: AsyncClient,
    bookmarks: dict[str, Bookmark],
) -> None:
    response = await client.get("/bookmarks", params={"unsorted": "false"})
    assert len(response.json()) == 5


async def test__list_bookmarks__by_folder(
    client: AsyncClient,
    folders: tuple[Folder, Folder],
    bookmarks: dict[str, Bookmark],
) -> None:
    work, _ = folders
    response = await client.get("/bookmarks", params={"folder_id": work.id})
    data = response.json()
    assert _names(data) == ["Delta guide", "Alpha guide"]
    assert all(b["folder_id"] == work.id for b in data)


async def test__list_bookmarks__unknown_folder_returns_empty(
    client: AsyncClient,
    bookmarks: dict[str, Bookmark],
) -> None:
    response = await client.get("/bookmarks", params={"folder_id": 12345})
    assert response.status_code == 200
    assert response.json() == []


async def test__list_bookmarks__non_integer_folder_id_returns_400(client: AsyncClient) -> None:
    response = await client.get("/bookmarks", params={"folder_id": "abc"})
    assert response.status_code == 400


async def test__list_bookmarks__url_substring(
    client: AsyncClient,
    bookmarks: dict[str, Bookmark],
) -> None:
    response = await client.get("/bookmarks", params={"url": "example.org"})
    assert _names(response.json()) == ["Delta guide", "Bravo notes"]


async def test__list_bookmarks__name_substring(
    client: AsyncClient,
    bookmarks: dict[str, Bookmark],
) -> None:
    response = await client.get("/bookmarks", params={"name": "guide"})
    assert _names(response.json()) == ["Delta guide", "Alpha guide"]


async def test__list_bookmarks__url_and_name_combine_with_and(
    client: AsyncClient,
    bookmarks: dict[str, Bookmark],
) -> None:
    response = await client.get("/bookmarks", params={"url": "example.org", "name": "guide"})
    assert _names(response.json()) == ["Delta guide"]


async def test__list_bookmarks__substring_filters_combine_with_scope(
    client: AsyncClient,
    folders: tuple[Folder, Folder],
    bookmarks: dict[str, Bookmark],
) -> None:
    _, reading = folders
    response = await client.get(
        "/bookmarks", params={"url": "example.com", "folder_id": reading.id},
    )
    assert _names(response.json()) == ["Charlie docs"]

    response = await client.get("/bookmarks", params={"url": "example.com", "unsorted": "true"})
    assert _names(response.json()) == ["Echo"]


async def test__list_bookmarks__like_wildcards_match_literally(
    client: AsyncClient,
    bookmarks: dict[str, Bookmark],
) -> None:
    """% and _ in a filter are plain characters, not wildcards."""
    response = await client.get("/bookmarks", params={"name": "%"})
    assert response.json() == []

    response = await client.get("/bookmarks", params={"url": "_"})
    assert response.json() == []


async def test__list_bookmarks__sort_by_name_asc(
    client: AsyncClient,
    bookmarks: dict[str, Bookmark],
) -> None:
    response = await client.get("/bookmarks", params={"sortBy": "name", "sortOrder": "asc"})
    assert _names(response.json()) == [
        "Alpha guide", "Bravo notes", "Charlie docs", "Delta guide", "Echo",
    ]


async def test__list_bookmarks__sort_by_name_defaults_to_desc(
    client: AsyncClient,
    bookmarks: dict[str, Bookmark],
) -> None:
    response = await client.get("/bookmarks", params={"sortBy": "name"})
    assert _names(response.json()) == [
        "Echo", "Delta guide", "Charlie docs", "Bravo notes", "Alpha guide",
    ]


async def test__list_bookmarks__bookmarked_at_asc(
    client: AsyncClient,
    bookmarks: dict[str, Bookmark],
) -> None:
    response = await client.get(
        "/bookmarks", params={"sortBy": "bookmarked_at", "sortOrder": "asc"},
    )
    assert _names(response.json()) == [
        "Alpha guide", "Bravo notes", "Charlie docs", "Delta guide", "Echo",
    ]


@pytest.mark.parametrize(
    ("sort_by", "sort_order"),
    [
        ("evil; DROP TABLE bookmarks", "x"),
        ("id", "desc"),
        ("name desc, url", "asc; DELETE FROM bookmarks"),
        ("", ""),
        ("NAME", "ASC"),
    ],
)
async def test__list_bookmarks__invalid_sort_falls_back_to_default(
    client: AsyncClient,
    bookmarks: dict[str, Bookmark],
    sort_by: str,
    sort_order: str,
) -> None:
    """Unknown sort values degrade to the default order instead of erroring."""
    invalid = await client.get("/bookmarks", params={"sortBy": sort_by, "sortOrder": sort_order})
    default = await client.get("/bookmarks")

    assert invalid.status_code == 200
    assert invalid.json() == default.json()


async def test__list_bookmarks__invalid_sort_order_with_valid_field(
    client: AsyncClient,
    bookmarks: dict[str, Bookmark],
) -> None:
    response = await client.get("/bookmarks", params={"sortBy": "name", "sortOrder": "sideways"})
    assert _names(response.json())[0] == "Echo"


async def test__list_bookmarks__invalid_sort_leaves_table_intact(
    client: AsyncClient,
    bookmarks: dict[str, Bookmark],
) -> None:
    await client.get("/bookmarks", params={"sortBy": "name; DROP TABLE bookmarks;--"})
    response = await client.get("/bookmarks")
    assert len(response.json()) == 5


async def test__list_bookmarks__repeated_reads_are_identical(
    client: AsyncClient,
    db_session: AsyncSession,
) -> None:
    """Equal sort keys still come back in a stable order."""
    for i in range(4):
        db_session.add(
            Bookmark(url=f"https://same.example/{i}", name="Same", bookmarked_at=BASE_TIME),
        )
    await db_session.flush()

    first = (await client.get("/bookmarks", params={"sortBy": "name"})).json()
    second = (await client.get("/bookmarks", params={"sortBy": "name"})).json()
    assert first == second
    assert [b["id"] for b in first] == sorted((b["id"] for b in first), reverse=True)


async def test__list_bookmarks__default_scope_unsorted(
    settings: Settings,
    make_client: Callable,
    folders: tuple[Folder, Folder],
    bookmarks: dict[str, Bookmark],
) -> None:
    """With BOOKMARKS_DEFAULT_SCOPE=unsorted an unfiltered listing only shows unsorted."""
    unsorted_settings = settings.model_copy(update={"bookmarks_default_scope": "unsorted"})
    work, _ = folders

    async with make_client(unsorted_settings) as client:
        response = await client.get("/bookmarks")
        assert _names(response.json()) == ["Echo", "Bravo notes"]

        # An explicit folder still selects that folder
        response = await client.get("/bookmarks", params={"folder_id": work.id})
        assert _names(response.json()) == ["Delta guide", "Alpha guide"]

        # Substring filters apply within the default scope
        response = await client.get("/bookmarks", params={"url": "example.org"})
        assert _names(response.json()) == ["Bravo notes"]


async def test__list_bookmarks__default_scope_all(
    settings: Settings,
    make_client: Callable,
    bookmarks: dict[str, Bookmark],
) -> None:
    all_settings = settings.model_copy(update={"bookmarks_default_scope": "all"})

    async with make_client(all_settings) as client:
        response = await client.get("/bookmarks")
        assert len(response.json()) == 5


async def test__list_bookmarks__empty_folder_id_means_no_folder_filter(
    client: AsyncClient,
    bookmarks: dict[str, Bookmark],
) -> None:
    response = await client.get("/bookmarks", params={"folder_id": ""})
    assert response.status_code == 200
    assert len(response.json()) == 5


@pytest.mark.parametrize("value", ["", "1", "yes", "TRUE"])
async def test__list_bookmarks__unsorted_other_than_true_is_ignored(
    client: AsyncClient,
    bookmarks: dict[str, Bookmark],
    value: str,
) -> None:
    response = await client.get("/bookmarks", params={"unsorted": value})
    assert response.status_code == 200
    assert len(response.json()) == 5
