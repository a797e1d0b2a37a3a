"""Tests for score arithmetic."""

import logging

from sqlreviewer.analyze.scoring import clamp, score, score_badge
from sqlreviewer.core.findings import Finding


def _f(code, severity):
    return Finding(item=code, severity=severity, summary=code)


class TestScore:
    def test_no_findings_is_full_score(self):
        assert score([]) == 100

    def test_ok_is_not_scored(self):
        assert score([_f("OK", "L8")]) == 100

    def test_single_l4(self):
        assert score([_f("CLA.001", "L4")]) == 80

    def test_sum_over_findings(self):
        assert score([_f("CLA.001", "L4"), _f("COL.001", "L1"), _f("IDX.001", "L2")]) == 65

    def test_order_independent(self):
        items = [_f("CLA.001", "L4"), _f("COL.001", "L1"), _f("RES.002", "L4")]
        assert score(items) == score(list(reversed(items)))

    def test_clamped_at_zero(self):
        items = [_f(f"CLA.{i:03d}", "L8") for i in range(5)]
        assert score(items) == 0

    def test_malformed_severity_forces_zero(self, caplog):
        with caplog.at_level(logging.ERROR, logger="sqlreviewer"):
            assert score([_f("CLA.001", "L1"), _f("XXX.001", "high")]) == 0
        assert "malformed severity" in caplog.text

    def test_clamp(self):
        assert clamp(-15) == 0
        assert clamp(130) == 100
        assert clamp(55) == 55


class TestScoreBadge:
    def test_badges(self):
        assert score_badge(100) == "★★★★★"
        assert score_badge(80) == "★★★★☆"
        assert score_badge(61) == "★★★★☆"
        assert score_badge(0) == "☆☆☆☆☆"
