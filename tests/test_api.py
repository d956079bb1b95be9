from __future__ import annotations

import unittest

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from streamfinder.db import Base, get_db
from streamfinder.main import SELECTION_REQUIRED_MESSAGE, app
from streamfinder.models import Club, League, StreamingProvider
from streamfinder.optimizer.cache import get_optimizer_cache


class ApiTests(unittest.TestCase):
    def setUp(self) -> None:
        engine = create_engine(
            "sqlite://",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        Base.metadata.create_all(bind=engine)
        self.session_factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
        self._seed()

        def _override_get_db():
            db = self.session_factory()
            try:
                yield db
            finally:
                db.close()

        app.dependency_overrides[get_db] = _override_get_db
        self.addCleanup(app.dependency_overrides.clear)
        get_optimizer_cache().clear()
        self.addCleanup(get_optimizer_cache().clear)
        self.client = TestClient(app)

    def _seed(self) -> None:
        with self.session_factory() as db:
            db.add_all(
                [
                    Club(
                        club_id=1,
                        slug="club-a",
                        name="Club A",
                        country="Deutschland",
                        competitions={"bundesliga": True, "champions_league": True, "dfb_pokal": False},
                    ),
                    Club(club_id=2, slug="club-b", name="Club B", country="England", competitions={}),
                    League(league_id=1, league_slug="bundesliga", name="Bundesliga", number_of_games=34),
                    League(
                        league_id=2,
                        league_slug="champions_league",
                        name="Champions League",
                        number_of_games=13,
                    ),
                    StreamingProvider(
                        streamer_id=1,
                        provider_name="P1",
                        slug="p1",
                        monthly_price="29,99",
                        yearly_price="",
                        coverage={"bundesliga": 34},
                    ),
                    StreamingProvider(
                        streamer_id=2,
                        provider_name="P2",
                        slug="p2",
                        monthly_price="19,99",
                        yearly_price="",
                        coverage={"champions_league": 13},
                    ),
                ]
            )
            db.commit()

    def test_optimize_full_ranking_uses_numeric_fields(self) -> None:
        response = self.client.post("/api/optimize", json={"club_ids": [1], "target_coverages": []})

        self.assertEqual(200, response.status_code)
        body = response.json()
        self.assertEqual(["bundesliga", "champions_league"], body["competitions"])
        self.assertEqual(3, body["count"])
        best = body["recommendations"][0]
        self.assertEqual([1, 2], [p["streamer_id"] for p in best["providers"]])
        self.assertEqual(100, best["coverage"])
        self.assertEqual(49.98, best["monthly_price"])
        self.assertEqual("Komplettabdeckung", best["label"])
        self.assertEqual(29.99, best["providers"][0]["monthly_price"])
        self.assertEqual("Bundesliga", best["competitions"][0]["name"])

    def test_optimize_uses_default_target_tiers(self) -> None:
        response = self.client.post("/api/optimize", json={"club_ids": [1]})

        body = response.json()
        self.assertEqual([100, 90, 66], [r["target_coverage"] for r in body["recommendations"]])
        self.assertEqual(49.98, body["recommendations"][0]["monthly_price"])
        self.assertEqual(29.99, body["recommendations"][2]["monthly_price"])

    def test_optimize_named_tiers(self) -> None:
        response = self.client.post("/api/optimize", json={"club_ids": [1], "named_tiers": True})

        recommendations = response.json()["recommendations"]
        self.assertEqual(
            ["Beste Abdeckung", "Preis-Leistungs-Sieger"],
            [r["tier"] for r in recommendations],
        )
        self.assertEqual("Beliebt", recommendations[1]["highlight"])

    def test_optimize_without_competitions_returns_message(self) -> None:
        response = self.client.post("/api/optimize", json={"club_ids": [2]})

        body = response.json()
        self.assertEqual(200, response.status_code)
        self.assertEqual([], body["recommendations"])
        self.assertEqual(SELECTION_REQUIRED_MESSAGE, body["message"])

    def test_optimize_without_clubs_returns_message(self) -> None:
        response = self.client.post(
            "/api/optimize",
            json={"club_ids": [], "competitions": ["bundesliga"]},
        )

        self.assertEqual(0, response.json()["count"])
        self.assertEqual(SELECTION_REQUIRED_MESSAGE, response.json()["message"])

    def test_optimize_manual_competition_without_games_has_null_cost_per_game(self) -> None:
        with self.session_factory() as db:
            db.add(
                StreamingProvider(
                    streamer_id=3,
                    provider_name="P3",
                    monthly_price="5,00",
                    yearly_price="",
                    coverage={"mls": 10},
                )
            )
            db.commit()

        response = self.client.post(
            "/api/optimize",
            json={"club_ids": [2], "competitions": ["mls"], "target_coverages": []},
        )

        recommendation = response.json()["recommendations"][0]
        self.assertEqual(0, recommendation["coverage"])
        self.assertIsNone(recommendation["cost_per_game"])

    def test_optimize_rejects_out_of_range_target(self) -> None:
        response = self.client.post("/api/optimize", json={"club_ids": [1], "target_coverages": [120]})

        self.assertEqual(422, response.status_code)

    def test_club_competitions(self) -> None:
        response = self.client.get("/api/clubs/1/competitions")

        self.assertEqual(["bundesliga", "champions_league"], response.json()["competitions"])
        self.assertEqual(404, self.client.get("/api/clubs/999/competitions").status_code)

    def test_list_clubs_search(self) -> None:
        response = self.client.get("/api/clubs", params={"search": "england"})

        self.assertEqual(["Club B"], [club["name"] for club in response.json()])

    def test_list_providers_parses_prices(self) -> None:
        providers = self.client.get("/api/providers").json()

        self.assertEqual([29.99, 19.99], [p["monthly_price"] for p in providers])
        self.assertIsNone(providers[0]["yearly_price"])

    def test_update_settings_changes_default_tiers(self) -> None:
        response = self.client.put("/api/settings", json={"default_target_coverages": [100]})

        self.assertEqual(200, response.status_code)
        self.assertEqual([100], response.json()["default_target_coverages"])
        body = self.client.post("/api/optimize", json={"club_ids": [1]}).json()
        self.assertEqual([100], [r["target_coverage"] for r in body["recommendations"]])

    def test_update_settings_rejects_inconsistent_sizes(self) -> None:
        response = self.client.put(
            "/api/settings",
            json={"max_combination_size": 2, "exhaustive_combination_size": 3},
        )

        self.assertEqual(400, response.status_code)
        self.assertEqual(3, self.client.get("/api/settings").json()["max_combination_size"])

    def test_clear_cache(self) -> None:
        self.client.post("/api/optimize", json={"club_ids": [1]})

        response = self.client.post("/api/optimize/cache/clear")

        self.assertEqual({"ok": True, "cleared": 1}, response.json())

    def test_logs_rejects_unknown_level(self) -> None:
        self.assertEqual(400, self.client.get("/api/logs", params={"level": "LOUD"}).status_code)
        self.assertEqual(200, self.client.get("/api/logs", params={"level": "warning"}).status_code)


if __name__ == "__main__":
    unittest.main()
