import pytest

import app as app_module


@pytest.fixture
def client(monkeypatch):
    monkeypatch.setattr(app_module, "active_practice", None)
    monkeypatch.setenv("PRACTICE_SEED", "11")
    app_module.app.config["TESTING"] = True
    with app_module.app.test_client() as c:
        yield c


def start(client):
    resp = client.post("/api/practice/start", json={})
    assert resp.status_code == 200
    return resp.get_json()


def test_requests_before_start_are_rejected(client):
    assert client.get("/api/practice/state").status_code == 400
    assert client.post("/api/practice/discard", json={"tile": 0}).status_code == 400
    assert client.post("/api/practice/undo").status_code == 400
    assert client.get("/api/practice/hint").status_code == 400
    assert client.post("/api/practice/preview", json={"tile": 0}).status_code == 400


def test_start_returns_fresh_state(client):
    state = start(client)
    assert state["status"] == "active"
    assert len(state["hand"]) == 14
    assert state["discards"] == []
    assert state["wall_remaining"] == 122
    assert state["can_undo"] is False
    assert state["shanten"] >= 0


def test_seeded_start_is_reproducible(client):
    first = start(client)
    second = start(client)
    assert first["hand"] == second["hand"]


def test_discard_then_undo(client):
    state = start(client)
    tile = state["hand"][0]

    resp = client.post("/api/practice/discard", json={"tile": tile["id"]})
    after = resp.get_json()
    assert after["changed"] is True
    assert after["discards"] == [tile]
    assert after["wall_remaining"] == 121
    assert after["can_undo"] is True

    undone = client.post("/api/practice/undo").get_json()
    assert undone["changed"] is True
    assert undone["hand"] == state["hand"]
    assert undone["discards"] == []


def test_discard_of_tile_not_in_hand_is_noop(client):
    state = start(client)
    hand_ids = {t["id"] for t in state["hand"]}
    missing = next(i for i in range(136) if i not in hand_ids)

    after = client.post("/api/practice/discard", json={"tile": missing}).get_json()
    assert after["changed"] is False
    assert after["hand"] == state["hand"]


@pytest.mark.parametrize("payload", [{}, {"tile": "3"}, {"tile": 136}, {"tile": True}])
def test_discard_rejects_invalid_tile(client, payload):
    start(client)
    assert client.post("/api/practice/discard", json=payload).status_code == 400


def test_hint_marks_best_discards(client):
    state = start(client)
    hint = client.get("/api/practice/hint").get_json()

    hand_ids = {t["id"] for t in state["hand"]}
    assert hint["best"]
    assert set(hint["best"]) <= hand_ids
    assert any(r["is_best"] for r in hint["recommendations"])
    assert hint["recommendations"][0]["is_best"]
    shanten = [r["shanten"] for r in hint["recommendations"]]
    assert shanten == sorted(shanten)


def test_preview(client):
    state = start(client)
    tile = state["hand"][5]

    preview = client.post("/api/practice/preview", json={"tile": tile["id"]}).get_json()
    assert preview["current_shanten"] == state["shanten"]
    assert "next_shanten" in preview
    assert all("left" in d for d in preview["details"])

    hand_ids = {t["id"] for t in state["hand"]}
    missing = next(i for i in range(136) if i not in hand_ids)
    assert client.post("/api/practice/preview", json={"tile": missing}).status_code == 400


def test_hint_evaluates_hand_once(client, monkeypatch):
    start(client)
    calls = []
    evaluate = app_module.advisor.evaluate_discards

    def counting(hand, discards):
        calls.append(len(hand))
        return evaluate(hand, discards)

    monkeypatch.setattr(app_module.advisor, "evaluate_discards", counting)
    assert client.get("/api/practice/hint").status_code == 200
    assert calls == [14]
