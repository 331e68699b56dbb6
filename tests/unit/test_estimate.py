"""Unit tests for the estimate compiler."""

import json

import pytest
from docgen.core.config import EstimateConfig
from docgen.core.errors import InvalidEstimate, MalformedResponse
from docgen.estimate import compile_estimate, ledger_to_json
from docgen.models.estimate import ChiffrageEstimate


def _estimate(*features, section="Authentification", roles=None):
    return {
        "sections": [{"name": section, "features": list(features)}],
        "roles": roles or [],
    }


class TestCompileEstimate:
    """Tests for compile_estimate."""

    @pytest.fixture
    def payload(self):
        return {
            "sections": [
                {
                    "name": "Authentification",
                    "features": [
                        {"name": "Inscription", "role": "Visiteur", "days": 2, "complexity": 1.5},
                        {"name": "Connexion", "role": "Utilisateur", "days": 1, "complexity": 1},
                    ],
                },
                {
                    "name": "Paiement",
                    "features": [
                        {"name": "Stripe", "role": "Client", "days": 3, "complexity": 2, "comment": "3D Secure"},
                    ],
                },
            ],
            "roles": [
                {"name": "Visiteur", "description": "Utilisateur non connecté"},
                {"name": "Client", "description": "Utilisateur payant"},
            ],
        }

    def test_single_feature(self):
        ledger = compile_estimate(_estimate({"name": "Login", "days": 2, "complexity": 1.5}), 500)
        line = ledger.lines[0]
        assert line.billable_days == pytest.approx(3)
        assert line.billable_price == pytest.approx(1500)

    def test_markup_chain(self):
        ledger = compile_estimate(_estimate({"name": "Socle", "days": 2, "complexity": 1}), 500)
        assert ledger.total_price == pytest.approx(1000)
        assert ledger.total_with_markup == pytest.approx(1200)
        assert ledger.tax == pytest.approx(240)
        assert ledger.total_with_tax == pytest.approx(1440)
        assert ledger.overhead == pytest.approx(200)

    def test_section_totals(self, payload):
        ledger = compile_estimate(payload, 400)
        auth, pay = ledger.sections
        assert auth.billable_days == pytest.approx(4)
        assert auth.billable_price == pytest.approx(1600)
        assert auth.feature_count == 2
        assert pay.billable_days == pytest.approx(6)
        assert ledger.total_days == pytest.approx(10)
        assert ledger.total_price == pytest.approx(4000)

    def test_features_sheet_layout(self, payload):
        rows = compile_estimate(payload, 400).features_sheet()
        assert [r["kind"] for r in rows] == ["feature", "feature", "subtotal", "feature", "subtotal", "total"]
        assert rows[2]["feature"] == "Sous-total Authentification"
        assert rows[3]["comment"] == "3D Secure"
        assert rows[-1]["feature"] == "TOTAL GÉNÉRAL"
        assert rows[-1]["total_price"] == 4000

    def test_duplicate_section_names_kept_apart(self):
        payload = {
            "sections": [
                {"name": "Admin", "features": [{"name": "A", "days": 1, "complexity": 1}]},
                {"name": "Admin", "features": [{"name": "B", "days": 2, "complexity": 1}]},
            ]
        }
        rows = compile_estimate(payload, 100).features_sheet()
        assert [r.get("feature") for r in rows if r["kind"] == "feature"] == ["A", "B"]

    def test_roles_sheet(self, payload):
        roles = compile_estimate(payload, 400).roles_sheet()
        assert roles == [
            {"role": "Visiteur", "description": "Utilisateur non connecté"},
            {"role": "Client", "description": "Utilisateur payant"},
        ]

    def test_summary_sheet(self, payload):
        summary = compile_estimate(payload, 400).summary_sheet()
        assert summary["daily_rate"] == 400
        assert summary["total_excl_tax"] == 4000
        assert summary["total_with_markup"] == 4800
        assert summary["tax"] == 960
        assert summary["total_with_tax"] == 5760
        assert summary["section_count"] == 2
        assert summary["feature_count"] == 3
        assert summary["role_count"] == 2

    def test_rounding_only_on_render(self):
        feature = {"name": "Tiers", "days": 1 / 3, "complexity": 1}
        ledger = compile_estimate(_estimate(feature, feature, feature), 300)
        assert ledger.total_price == pytest.approx(300)
        assert ledger.features_sheet()[0]["total_price"] == 100.0

    def test_zero_rate(self, payload):
        assert compile_estimate(payload, 0).total_with_tax == 0

    def test_empty_estimate(self):
        ledger = compile_estimate({"sections": []}, 500)
        assert ledger.total_with_tax == 0
        assert ledger.features_sheet()[-1]["kind"] == "total"

    def test_from_model(self, payload):
        ledger = compile_estimate(ChiffrageEstimate.from_dict(payload), 400)
        assert len(ledger.lines) == 3

    def test_from_stored_json(self, payload):
        text = f"```json\n{json.dumps(payload)}\n```"
        assert compile_estimate(text, 400).total_price == pytest.approx(4000)

    def test_unparseable_text(self):
        with pytest.raises(MalformedResponse):
            compile_estimate("pas du json", 400)

    @pytest.mark.parametrize("rate", [-1, float("nan"), float("inf"), "500"])
    def test_invalid_rate(self, payload, rate):
        with pytest.raises(InvalidEstimate):
            compile_estimate(payload, rate)

    def test_negative_days(self):
        with pytest.raises(InvalidEstimate):
            compile_estimate(_estimate({"name": "X", "days": -1, "complexity": 1}), 500)

    @pytest.mark.parametrize("complexity", [0, -2])
    def test_non_positive_complexity(self, complexity):
        with pytest.raises(InvalidEstimate):
            compile_estimate(_estimate({"name": "X", "days": 1, "complexity": complexity}), 500)

    def test_non_numeric_days(self):
        with pytest.raises(InvalidEstimate):
            compile_estimate(_estimate({"name": "X", "days": "beaucoup", "complexity": 1}), 500)

    def test_unlisted_complexity_warns(self):
        ledger = compile_estimate(_estimate({"name": "X", "days": 1, "complexity": 1.25}), 500)
        assert ledger.total_price == pytest.approx(625)
        assert len(ledger.warnings) == 1
        assert "1.25" in ledger.warnings[0]

    def test_unlisted_complexity_strict(self):
        config = EstimateConfig(strict_complexity=True)
        with pytest.raises(InvalidEstimate):
            compile_estimate(_estimate({"name": "X", "days": 1, "complexity": 1.25}), 500, config)

    def test_ledger_to_json(self, payload):
        data = json.loads(ledger_to_json(compile_estimate(payload, 400)))
        assert set(data) == {"features", "roles", "summary", "warnings"}
