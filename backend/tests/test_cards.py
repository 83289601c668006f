import pytest


@pytest.fixture
async def board_setup(register, create_board, create_list):
    _, headers = await register("owner@example.com")
    board_id = (await create_board(headers))["id"]
    todo = await create_list(headers, board_id, "Todo")
    return headers, board_id, todo["id"]


async def test_card_update_fields(client, board_setup, create_card):
    headers, board_id, list_id = board_setup
    card = await create_card(headers, board_id, list_id, "Draft")
    url = f"/boards/{board_id}/lists/{list_id}/cards/{card['id']}"

    empty = await client.patch(url, json={}, headers=headers)
    assert empty.status_code == 400
    assert empty.json() == {"message": "title, description, or dueDate is required"}

    blank_title = await client.patch(url, json={"title": "  "}, headers=headers)
    assert blank_title.status_code == 400

    bad_date = await client.patch(url, json={"dueDate": "05/01/2024"}, headers=headers)
    assert bad_date.status_code == 400
    assert bad_date.json() == {"message": "Invalid dueDate"}

    updated = await client.patch(
        url,
        json={"title": "Final", "description": "Details", "dueDate": "2024-05-01"},
        headers=headers,
    )
    assert updated.status_code == 200
    body = updated.json()["card"]
    assert body["title"] == "Final"
    assert body["description"] == "Details"
    assert body["dueDate"].startswith("2024-05-01T00:00:00")

    # Omitted fields stay put; explicit null clears
    cleared = await client.patch(url, json={"dueDate": None}, headers=headers)
    body = cleared.json()["card"]
    assert body["dueDate"] is None
    assert body["title"] == "Final"
    assert body["description"] == "Details"


async def test_card_reorder_skips_archived_cards(client, board_setup, create_card):
    headers, board_id, list_id = board_setup
    cards_url = f"/boards/{board_id}/lists/{list_id}/cards"
    a = await create_card(headers, board_id, list_id, "A")
    b = await create_card(headers, board_id, list_id, "B")
    c = await create_card(headers, board_id, list_id, "C")

    archived = await client.patch(f"{cards_url}/{b['id']}/archive", headers=headers)
    assert archived.json()["card"]["archived"] is True
    assert archived.json()["card"]["archivedAt"] is not None

    # The archived card is not part of the caller's ordering
    rejected = await client.patch(
        f"{cards_url}/reorder",
        json={"orderedCardIds": [c["id"], b["id"], a["id"]]},
        headers=headers,
    )
    assert rejected.status_code == 404
    assert rejected.json() == {"message": "Card not found"}

    reordered = await client.patch(
        f"{cards_url}/reorder", json={"orderedCardIds": [c["id"], a["id"]]}, headers=headers
    )
    assert [(card["title"], card["position"]) for card in reordered.json()["cards"]] == [
        ("C", 0),
        ("A", 1),
    ]

    active = await client.get(cards_url, headers=headers)
    assert [card["title"] for card in active.json()["cards"]] == ["C", "A"]

    archive_view = await client.get(f"/boards/{board_id}/archived", headers=headers)
    archived_cards = archive_view.json()["lists"][0]["cards"]
    assert [(card["title"], card["position"]) for card in archived_cards] == [("B", 2)]

    restored = await client.patch(f"{cards_url}/{b['id']}/unarchive", headers=headers)
    assert restored.json()["card"]["archivedAt"] is None
    active = await client.get(cards_url, headers=headers)
    assert [card["title"] for card in active.json()["cards"]] == ["C", "A", "B"]


async def test_delete_card_leaves_gap(client, board_setup, create_card):
    headers, board_id, list_id = board_setup
    cards_url = f"/boards/{board_id}/lists/{list_id}/cards"
    await create_card(headers, board_id, list_id, "A")
    b = await create_card(headers, board_id, list_id, "B")
    await create_card(headers, board_id, list_id, "C")

    deleted = await client.delete(f"{cards_url}/{b['id']}", headers=headers)
    assert deleted.status_code == 204

    cards = await client.get(cards_url, headers=headers)
    assert [card["position"] for card in cards.json()["cards"]] == [0, 2]

    again = await client.delete(f"{cards_url}/{b['id']}", headers=headers)
    assert again.status_code == 404


async def test_card_labels_replace_and_cleanup(client, board_setup, create_card, create_board):
    headers, board_id, list_id = board_setup
    card = await create_card(headers, board_id, list_id, "Card")
    card_url = f"/boards/{board_id}/lists/{list_id}/cards/{card['id']}"

    bug = (await client.post(
        f"/boards/{board_id}/labels", json={"name": "bug", "color": "red"}, headers=headers
    )).json()["label"]
    ui = (await client.post(
        f"/boards/{board_id}/labels", json={"name": "ui"}, headers=headers
    )).json()["label"]
    other_board = await create_board(headers, "Other")
    foreign = (await client.post(
        f"/boards/{other_board['id']}/labels", json={"name": "x"}, headers=headers
    )).json()["label"]

    nameless = await client.post(f"/boards/{board_id}/labels", json={"name": ""}, headers=headers)
    assert nameless.status_code == 400

    assigned = await client.put(
        f"{card_url}/labels", json={"labelIds": [ui["id"], bug["id"], ui["id"]]}, headers=headers
    )
    assert [label["name"] for label in assigned.json()["card"]["labels"]] == ["bug", "ui"]

    rejected = await client.put(
        f"{card_url}/labels", json={"labelIds": [bug["id"], foreign["id"]]}, headers=headers
    )
    assert rejected.status_code == 404
    assert rejected.json() == {"message": "Label not found"}

    renamed = await client.patch(
        f"/boards/{board_id}/labels/{bug['id']}", json={"color": "orange"}, headers=headers
    )
    assert renamed.json()["label"] == {**bug, "color": "orange"}

    await client.delete(f"/boards/{board_id}/labels/{ui['id']}", headers=headers)
    full = await client.get(f"/boards/{board_id}/full", headers=headers)
    labels = full.json()["lists"][0]["cards"][0]["labels"]
    assert [label["name"] for label in labels] == ["bug"]

    cleared = await client.put(f"{card_url}/labels", json={"labelIds": []}, headers=headers)
    assert cleared.json()["card"]["labels"] == []


async def test_checklist_items(client, board_setup, create_card):
    headers, board_id, list_id = board_setup
    card = await create_card(headers, board_id, list_id, "Card")
    url = f"/boards/{board_id}/lists/{list_id}/cards/{card['id']}/checklist"

    blank = await client.post(url, json={"text": " "}, headers=headers)
    assert blank.status_code == 400
    assert blank.json() == {"message": "Text is required"}

    first = (await client.post(url, json={"text": "one"}, headers=headers)).json()["item"]
    second = (await client.post(url, json={"text": "two"}, headers=headers)).json()["item"]
    assert (first["position"], second["position"], first["done"]) == (0, 1, False)

    toggled = await client.patch(f"{url}/{first['id']}", json={"done": True}, headers=headers)
    assert toggled.json()["item"]["done"] is True

    nothing = await client.patch(f"{url}/{first['id']}", json={}, headers=headers)
    assert nothing.status_code == 400

    reordered = await client.patch(
        f"{url}/reorder", json={"orderedItemIds": [second["id"], first["id"]]}, headers=headers
    )
    assert [item["text"] for item in reordered.json()["items"]] == ["two", "one"]

    missing = await client.patch(
        f"{url}/reorder", json={"orderedItemIds": [second["id"]]}, headers=headers
    )
    assert missing.status_code == 404
    assert missing.json() == {"message": "Checklist item not found"}

    deleted = await client.delete(f"{url}/{second['id']}", headers=headers)
    assert deleted.status_code == 204
    items = await client.get(url, headers=headers)
    assert [item["text"] for item in items.json()["items"]] == ["one"]


async def test_card_update_rejects_overlong_title(client, board_setup, create_card):
    headers, board_id, list_id = board_setup
    card = await create_card(headers, board_id, list_id, "Short")
    url = f"/boards/{board_id}/lists/{list_id}/cards/{card['id']}"

    too_long = await client.patch(url, json={"title": "x" * 501}, headers=headers)
    assert too_long.status_code == 400
    assert too_long.json() == {"message": "Title must be at most 500 characters"}

    at_limit = await client.patch(url, json={"title": "x" * 500}, headers=headers)
    assert at_limit.status_code == 200

    unchanged = await client.get(f"/boards/{board_id}/lists/{list_id}/cards", headers=headers)
    assert unchanged.json()["cards"][0]["title"] == "x" * 500
