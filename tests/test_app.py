"""
Tests for the Flask host, driven through app.test_client().
"""

from dataclasses import replace

import pytest

import main
from main import WORKSPACES, app


@pytest.fixture
def client():
    app.config["TESTING"] = True
    with app.test_client() as c:
        yield c


def post(client, url, **payload):
    return client.post(url, json=payload)


class TestIndex:
    def test_lists_experiments_and_algorithms(self, client):
        data = client.get("/").get_json()
        assert "cpu-scheduling" in data["experiments"]
        assert {a["key"] for a in data["algorithms"]} >= {"bubble", "fcfs", "rr", "tcp_handshake"}
        assert data["families"]["scheduling"] == ["fcfs", "sjf", "rr"]
        assert data["families"]["sorting"] == ["bubble", "insertion", "quick"]

    def test_unknown_experiment(self, client):
        res = client.get("/api/graph/snapshot")
        assert res.status_code == 400
        assert res.get_json() == {"error": "Unknown experiment: graph"}


class TestBSTRoutes:
    def test_insert_search_delete(self, client):
        for v in (5, 3, 8):
            assert post(client, "/api/bst/insert", value=v).get_json()["ok"]
        data = post(client, "/api/bst/search", value=3).get_json()
        assert data["ok"]
        assert data["state"]["highlighted"] == [5, 3]
        data = post(client, "/api/bst/delete", value=5).get_json()
        assert data["state"]["values"] == [3, 8]

    def test_non_numeric_value(self, client):
        res = post(client, "/api/bst/insert", value="abc")
        assert res.status_code == 400
        assert res.get_json()["error"] == "value must be an integer"

    def test_unknown_operation(self, client):
        assert post(client, "/api/bst/rotate", value=1).status_code == 400

    def test_state_is_per_session(self, client):
        post(client, "/api/bst/insert", value=1)
        with app.test_client() as other:
            assert other.get("/api/bst/snapshot").get_json()["state"]["values"] == []


class TestHashRoutes:
    def test_insert_then_search(self, client):
        data = post(client, "/api/hash-table/insert", key="a", value="1").get_json()
        assert (data["ok"], data["index"]) == (True, 7)
        data = post(client, "/api/hash-table/search", key="a").get_json()
        assert data["ok"]
        assert data["state"]["operations"]["searches"] == 1

    def test_empty_key_rejected(self, client):
        res = post(client, "/api/hash-table/insert", key="  ", value="1")
        assert res.status_code == 400

    def test_delete_by_index(self, client):
        post(client, "/api/hash-table/insert", key="a", value="1")
        assert post(client, "/api/hash-table/delete", index=7).get_json()["ok"]
        assert post(client, "/api/hash-table/delete", index=-1).status_code == 400


class TestSortingRoutes:
    def test_full_run(self, client):
        post(client, "/api/sorting/array", values=[3, 1, 2])
        post(client, "/api/sorting/algorithm", algo_key="insertion")
        data = post(client, "/api/sorting/run").get_json()
        assert data["ok"]
        assert data["state"]["array"] == [1, 2, 3]
        assert data["state"]["algorithm"] == "insertion"

    def test_step_and_cancel(self, client):
        post(client, "/api/sorting/array", values=[4, 3, 2, 1])
        assert post(client, "/api/sorting/start").get_json()["ok"]
        assert not post(client, "/api/sorting/start").get_json()["ok"]
        step = post(client, "/api/sorting/step").get_json()["step"]
        assert step["kind"] == "start"
        data = post(client, "/api/sorting/cancel").get_json()
        assert data["state"]["status"] == "cancelled"

    def test_bad_array(self, client):
        assert post(client, "/api/sorting/array", values=[]).status_code == 400
        assert post(client, "/api/sorting/array", values=[1, "x"]).status_code == 400

    def test_unknown_algorithm(self, client):
        res = post(client, "/api/sorting/algorithm", algo_key="fcfs")
        assert res.status_code == 400
        assert res.get_json()["error"] == "Unknown algorithm: fcfs"

    def test_shuffle(self, client):
        data = post(client, "/api/sorting/shuffle", size=5).get_json()
        assert len(data["state"]["array"]) == 5

    def test_speed(self, client):
        assert post(client, "/api/sorting/speed", speed="fast").get_json()["seconds"] == 0.15
        assert post(client, "/api/sorting/speed", speed="warp").status_code == 400


class TestSchedulingRoutes:
    def test_default_run(self, client):
        data = post(client, "/api/cpu-scheduling/run").get_json()
        assert data["state"]["metrics"]["avg_waiting_time"] == pytest.approx(6.25)

    def test_custom_processes(self, client):
        procs = [{"burst_time": 2, "arrival_time": 0}, {"burst_time": 1, "arrival_time": 0, "name": "B"}]
        post(client, "/api/cpu-scheduling/processes", processes=procs)
        post(client, "/api/cpu-scheduling/algorithm", algo_key="sjf")
        data = post(client, "/api/cpu-scheduling/run").get_json()
        assert [e["process"] for e in data["state"]["timeline"]] == ["B", "P1", "P1"]

    def test_add_process(self, client):
        data = post(client, "/api/cpu-scheduling/add", burst_time=2).get_json()
        assert data["ok"]
        assert len(data["state"]["processes"]) == 5

    def test_negative_burst_rejected(self, client):
        res = post(client, "/api/cpu-scheduling/add", burst_time=-1)
        assert res.status_code == 400

    def test_duplicate_names_rejected(self, client):
        procs = [{"burst_time": 2, "name": "A"}, {"burst_time": 1, "name": "A"}]
        res = post(client, "/api/cpu-scheduling/processes", processes=procs)
        assert res.status_code == 400
        assert res.get_json()["error"] == "Duplicate process name: A"
        state = client.get("/api/cpu-scheduling/snapshot").get_json()["state"]
        assert [p["name"] for p in state["processes"]] == ["P1", "P2", "P3", "P4"]

    def test_generated_name_collides_with_explicit_one(self, client):
        procs = [{"burst_time": 2, "name": "P2"}, {"burst_time": 1}]
        assert post(client, "/api/cpu-scheduling/processes", processes=procs).status_code == 400

    def test_add_with_taken_name_rejected(self, client):
        res = post(client, "/api/cpu-scheduling/add", burst_time=2, name="P3")
        assert res.status_code == 400
        state = client.get("/api/cpu-scheduling/snapshot").get_json()["state"]
        assert len(state["processes"]) == 4

    def test_bst_is_not_steppable(self, client):
        assert post(client, "/api/bst/start").status_code == 400


class TestCompareAndSubmission:
    def test_compare_sorting(self, client):
        post(client, "/api/sorting/array", values=[5, 4, 3, 2, 1])
        data = post(client, "/api/compare", kind="sorting", left="bubble", right="quick").get_json()
        assert data["left"]["algo_key"] == "bubble"
        assert data["right"]["algo_key"] == "quick"
        assert data["winner_steps"]

    def test_compare_scheduling(self, client):
        data = post(client, "/api/compare", kind="cpu-scheduling", left="fcfs", right="sjf").get_json()
        assert data["winner_waiting"] == "Shortest Job First"

    def test_compare_wrong_family(self, client):
        res = post(client, "/api/compare", kind="sorting", left="bubble", right="fcfs")
        assert res.status_code == 400

    def test_compare_uses_configured_quantum(self, client, monkeypatch):
        monkeypatch.setattr(main, "settings", replace(main.settings, rr_quantum=4))
        data = post(client, "/api/compare", kind="cpu-scheduling", left="rr", right="fcfs").get_json()
        assert data["left"]["avg_waiting_time"] == pytest.approx(8.5)

    def test_compare_default_quantum(self, client):
        data = post(client, "/api/compare", kind="cpu-scheduling", left="rr", right="fcfs").get_json()
        assert data["left"]["avg_waiting_time"] == pytest.approx(9.5)

    def test_submission(self, client):
        post(client, "/api/tcp-handshake/run")
        data = client.get("/api/submission/tcp-handshake").get_json()
        assert data["experiment"] == "tcp-handshake"
        assert data["experiment_state"]["phase"] == 4


class TestWorkspaces:
    def test_oldest_workspace_evicted(self, monkeypatch):
        monkeypatch.setattr(main, "settings", replace(main.settings, max_workspaces=3))
        app.config["TESTING"] = True
        clients = [app.test_client() for _ in range(5)]
        for i, c in enumerate(clients):
            post(c, "/api/bst/insert", value=i)

        assert len(WORKSPACES) <= 3
        newest = clients[-1].get("/api/bst/snapshot").get_json()["state"]
        assert newest["values"] == [4]
        # an evicted session starts over with a fresh workspace
        oldest = clients[0].get("/api/bst/snapshot").get_json()["state"]
        assert oldest["values"] == []
        assert len(WORKSPACES) <= 3

    def test_recent_use_keeps_a_workspace(self, monkeypatch):
        monkeypatch.setattr(main, "settings", replace(main.settings, max_workspaces=2))
        app.config["TESTING"] = True
        first, second, third = app.test_client(), app.test_client(), app.test_client()
        post(first, "/api/bst/insert", value=1)
        post(second, "/api/bst/insert", value=2)
        first.get("/api/bst/snapshot")
        post(third, "/api/bst/insert", value=3)

        assert first.get("/api/bst/snapshot").get_json()["state"]["values"] == [1]
        assert len(WORKSPACES) == 2


class TestPlaybackRoutes:
    def test_step_back_and_goto(self, client):
        post(client, "/api/sorting/array", values=[3, 2, 1])
        post(client, "/api/sorting/start")
        for _ in range(3):
            post(client, "/api/sorting/step")

        data = post(client, "/api/sorting/step/back").get_json()
        assert data["ok"]
        assert data["step"]["step_number"] == 1

        data = post(client, "/api/sorting/step/goto", index=5).get_json()
        assert data["step"]["step_number"] == 5
        assert not post(client, "/api/sorting/step/goto", index=10_000).get_json()["ok"]
        assert post(client, "/api/sorting/step/goto", index=-1).status_code == 400

    def test_cancel_after_stepping_back(self, client):
        post(client, "/api/sorting/array", values=[4, 3, 2, 1])
        post(client, "/api/sorting/start")
        for _ in range(4):
            post(client, "/api/sorting/step")
        post(client, "/api/sorting/step/back")
        data = post(client, "/api/sorting/cancel").get_json()
        assert data["ok"]
        assert data["state"]["status"] == "cancelled"

    def test_pause_play_toggle(self, client):
        post(client, "/api/sorting/start")
        assert post(client, "/api/sorting/pause").get_json()["state"]["status"] == "paused"
        assert post(client, "/api/sorting/play").get_json()["state"]["status"] == "running"
        assert not post(client, "/api/sorting/toggle").get_json()["ok"]
        assert post(client, "/api/sorting/toggle").get_json()["ok"]

    def test_tick_waits_for_speed(self, client):
        post(client, "/api/sorting/start")
        post(client, "/api/sorting/speed", speed="slow")
        assert not post(client, "/api/sorting/tick").get_json()["ok"]

    def test_speed_in_seconds(self, client):
        data = post(client, "/api/sorting/speed", seconds=0.3).get_json()
        assert data == {"speed": "custom", "seconds": 0.3}
        assert post(client, "/api/sorting/speed", seconds=0.001).get_json()["seconds"] == 0.02
        assert post(client, "/api/sorting/speed", seconds="fast").status_code == 400
        assert post(client, "/api/sorting/speed", seconds=0).status_code == 400


class TestLogRoutes:
    def test_tail(self, client):
        for v in (5, 3, 8):
            post(client, "/api/bst/insert", value=v)
        data = client.get("/api/log/bst?tail=2").get_json()
        assert data["lines"] == ["Comparing 8 > 5, going right", "✅ Inserted node 8"]
        assert len(client.get("/api/log/bst").get_json()["lines"]) == 5

    def test_truncate(self, client):
        for v in (5, 3, 8):
            post(client, "/api/bst/insert", value=v)
        data = post(client, "/api/log/bst/truncate", keep=1).get_json()
        assert data["lines"] == ["✅ Inserted node 8"]
        assert data["dropped"] == 4
        assert client.get("/api/bst/snapshot").get_json()["state"]["log"] == ["✅ Inserted node 8"]

    def test_bad_arguments(self, client):
        assert client.get("/api/log/bst?tail=x").status_code == 400
        assert post(client, "/api/log/bst/truncate").status_code == 400
        assert client.get("/api/log/graph").status_code == 400
