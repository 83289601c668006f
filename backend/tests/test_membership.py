from taskboard.models import BoardMember


async def test_invite_accept_flow(client, register, create_board):
    owner_user, owner = await register("owner@example.com", name="Olive")
    member_user, member = await register("member@example.com", name="Max")
    board = await create_board(owner, "Shared")
    board_id = board["id"]

    invited = await client.post(
        f"/boards/{board_id}/invite", json={"email": "  MEMBER@example.com "}, headers=owner
    )
    assert invited.status_code == 201
    invite = invited.json()["invite"]
    assert invite["inviteeId"] == member_user["id"]

    # Re-inviting returns the same pending invite
    again = await client.post(
        f"/boards/{board_id}/invite", json={"email": "member@example.com"}, headers=owner
    )
    assert again.status_code == 201
    assert again.json()["invite"]["id"] == invite["id"]

    inbox = await client.get("/boards/invites", headers=member)
    assert inbox.status_code == 200
    [pending] = inbox.json()["invites"]
    assert pending["board"] == {"id": board_id, "title": "Shared"}
    assert pending["inviter"]["email"] == "owner@example.com"

    accepted = await client.post(f"/boards/invites/{invite['id']}/accept", headers=member)
    assert accepted.status_code == 200
    assert accepted.json()["board"]["id"] == board_id

    twice = await client.post(f"/boards/invites/{invite['id']}/accept", headers=member)
    assert twice.status_code == 404
    assert twice.json() == {"message": "Invite not found"}

    inbox = await client.get("/boards/invites", headers=member)
    assert inbox.json()["invites"] == []

    members = await client.get(f"/boards/{board_id}/members", headers=member)
    assert [
        (entry["userId"], entry["role"], entry["isOwner"]) for entry in members.json()["members"]
    ] == [
        (owner_user["id"], "OWNER", True),
        (member_user["id"], "MEMBER", False),
    ]

    full = await client.get(f"/boards/{board_id}/full", headers=member)
    assert full.status_code == 200


async def test_invite_errors(client, register, create_board, invite_and_accept):
    _, owner = await register("owner@example.com")
    _, member = await register("member@example.com")
    board_id = (await create_board(owner))["id"]
    url = f"/boards/{board_id}/invite"

    blank = await client.post(url, json={"email": " "}, headers=owner)
    assert blank.status_code == 400
    assert blank.json() == {"message": "Email is required"}

    unknown = await client.post(url, json={"email": "ghost@example.com"}, headers=owner)
    assert unknown.status_code == 404
    assert unknown.json() == {"message": "User not found"}

    self_invite = await client.post(url, json={"email": "owner@example.com"}, headers=owner)
    assert self_invite.status_code == 400
    assert self_invite.json() == {"message": "You cannot invite yourself"}

    await invite_and_accept(owner, board_id, "member@example.com", member)
    already = await client.post(url, json={"email": "member@example.com"}, headers=owner)
    assert already.status_code == 400
    assert already.json() == {"message": "User is already a member"}


async def test_invite_can_only_be_used_by_its_invitee(client, register, create_board):
    _, owner = await register("owner@example.com")
    _, member = await register("member@example.com")
    _, bystander = await register("bystander@example.com")
    board_id = (await create_board(owner))["id"]
    invited = await client.post(
        f"/boards/{board_id}/invite", json={"email": "member@example.com"}, headers=owner
    )
    invite_id = invited.json()["invite"]["id"]

    stolen = await client.post(f"/boards/invites/{invite_id}/accept", headers=bystander)
    assert stolen.status_code == 404

    declined = await client.delete(f"/boards/invites/{invite_id}", headers=member)
    assert declined.status_code == 204

    after = await client.post(f"/boards/invites/{invite_id}/accept", headers=member)
    assert after.status_code == 404
    board = await client.get(f"/boards/{board_id}", headers=member)
    assert board.status_code == 404


async def test_remove_member(client, register, create_board, invite_and_accept):
    owner_user, owner = await register("owner@example.com")
    member_user, member = await register("member@example.com")
    board_id = (await create_board(owner))["id"]
    await invite_and_accept(owner, board_id, "member@example.com", member)

    remove_owner = await client.delete(
        f"/boards/{board_id}/members/{owner_user['id']}", headers=owner
    )
    assert remove_owner.status_code == 400
    assert remove_owner.json() == {"message": "Cannot remove the board owner"}

    removed = await client.delete(f"/boards/{board_id}/members/{member_user['id']}", headers=owner)
    assert removed.status_code == 204

    again = await client.delete(f"/boards/{board_id}/members/{member_user['id']}", headers=owner)
    assert again.status_code == 404
    assert again.json() == {"message": "Member not found"}

    lost_access = await client.get(f"/boards/{board_id}", headers=member)
    assert lost_access.status_code == 404


async def test_members_list_shows_owner_once_despite_own_membership_row(
    client, register, create_board, session_factory
):
    owner_user, owner = await register("owner@example.com")
    board_id = (await create_board(owner))["id"]

    async with session_factory() as session:
        session.add(BoardMember(board_id=board_id, user_id=owner_user["id"]))
        await session.commit()

    members = await client.get(f"/boards/{board_id}/members", headers=owner)
    assert members.status_code == 200
    assert [
        (entry["userId"], entry["role"], entry["isOwner"]) for entry in members.json()["members"]
    ] == [(owner_user["id"], "OWNER", True)]
