"""Tests for the built-in checks and the heuristic analyzer."""

import pytest

from sqlreviewer.analyze.heuristic import run_heuristic_checks
from sqlreviewer.extract.query_loader import Query4Audit, new_query4audit
from sqlreviewer.rules.argument.arg001_like_wildcards import ARG001
from sqlreviewer.rules.classic.cla001_no_where import CLA001
from sqlreviewer.rules.classic.cla002_order_by_rand import CLA002
from sqlreviewer.rules.column.col001_select_star import COL001
from sqlreviewer.rules.function.fun004_sysdate import FUN004
from sqlreviewer.rules.keyword.kwr001_calc_found_rows import KWR001
from sqlreviewer.rules.result.res002_limit_without_order import RES002


def _code(check, sql, catalog):
    return check.evaluate(new_query4audit(sql), catalog).item


class TestNoWhere:
    @pytest.mark.parametrize(
        "sql, expected",
        [
            ("select id from tbl", "CLA.001"),
            ("select id from tbl where id = 1", "OK"),
            ("select 1", "OK"),
            ("delete from rental", "CLA.014"),
            ("delete from rental where rental_id = 1", "OK"),
            ("update film set rental_rate = 0.99", "CLA.015"),
            ("update film set rental_rate = 0.99 where film_id = 1", "OK"),
        ],
    )
    def test_statements(self, catalog, sql, expected):
        assert _code(CLA001(), sql, catalog) == expected

    def test_returns_catalog_metadata(self, catalog):
        f = CLA001().evaluate(new_query4audit("select id from tbl"), catalog)
        assert f == catalog["CLA.001"]
        assert f.severity == "L4"


class TestOrderByRand:
    def test_fires(self, catalog):
        assert _code(CLA002(), "select id from t where a = 1 order by rand()", catalog) == "CLA.002"

    def test_rand_outside_order(self, catalog):
        assert _code(CLA002(), "select rand() from t where a = 1", catalog) == "OK"


class TestSelectStar:
    @pytest.mark.parametrize(
        "sql, expected",
        [
            ("select * from t where id = 1", "COL.001"),
            ("select t.* from t where id = 1", "COL.001"),
            ("select count(*) from t where id = 1", "OK"),
            ("select id from t where id in (select * from u)", "COL.001"),
            ("select id from t where id = 1", "OK"),
        ],
    )
    def test_statements(self, catalog, sql, expected):
        assert _code(COL001(), sql, catalog) == expected


class TestLikeWildcards:
    @pytest.mark.parametrize(
        "sql, expected",
        [
            ("select a from t where name like '%foo'", "ARG.001"),
            ("select a from t where name like '_foo'", "ARG.001"),
            ("select a from t where name like 'foo'", "ARG.002"),
            ("select a from t where name like 'foo%'", "OK"),
            ("select a from t where name like 'foo' or city like '%bar'", "ARG.001"),
        ],
    )
    def test_patterns(self, catalog, sql, expected):
        assert _code(ARG001(), sql, catalog) == expected


class TestLimitWithoutOrder:
    def test_fires(self, catalog):
        assert _code(RES002(), "select a from t where b = 1 limit 10", catalog) == "RES.002"

    def test_ordered(self, catalog):
        assert _code(RES002(), "select a from t where b = 1 order by a limit 10", catalog) == "OK"


class TestFingerprintChecks:
    def test_calc_found_rows(self, catalog):
        audit = Query4Audit(query="SELECT SQL_CALC_FOUND_ROWS a FROM t WHERE b = 1 LIMIT 10")
        assert KWR001().evaluate(audit, catalog).item == "KWR.001"

    def test_calc_found_rows_in_string_ignored(self, catalog):
        audit = Query4Audit(query="select 'sql_calc_found_rows' from t where b = 1")
        assert KWR001().evaluate(audit, catalog).item == "OK"

    def test_sysdate(self, catalog):
        audit = Query4Audit(query="select a from t where c > SYSDATE()")
        assert FUN004().evaluate(audit, catalog).item == "FUN.004"

    def test_sysdate_after_hash_in_string(self, catalog):
        audit = Query4Audit(query="select a from t where color = '#ff0000' and b = sysdate()")
        assert FUN004().evaluate(audit, catalog).item == "FUN.004"

    def test_calc_found_rows_after_dashes_in_string(self, catalog):
        audit = Query4Audit(query="select sql_calc_found_rows a from t where name = 'a--b' limit 5")
        assert KWR001().evaluate(audit, catalog).item == "KWR.001"

    def test_now_is_fine(self, catalog):
        audit = Query4Audit(query="select a from t where c > now()")
        assert FUN004().evaluate(audit, catalog).item == "OK"


class TestHeuristicAnalyzer:
    def test_no_where_only(self, catalog):
        findings = run_heuristic_checks(new_query4audit("select id from tbl"), catalog)
        assert set(findings) == {"CLA.001"}

    def test_clean_query_has_no_findings(self, catalog):
        findings = run_heuristic_checks(new_query4audit("select id from tbl where id = 1"), catalog)
        assert findings == {}

    def test_several_checks(self, catalog):
        audit = new_query4audit("select * from t where name like '%x' limit 5")
        assert set(run_heuristic_checks(audit, catalog)) == {"COL.001", "ARG.001", "RES.002"}

    def test_ignored_check_not_evaluated(self, catalog, monkeypatch):
        calls = []
        original = CLA001.evaluate

        def spy(self, audit, cat):
            calls.append(1)
            return original(self, audit, cat)

        monkeypatch.setattr(CLA001, "evaluate", spy)
        run_heuristic_checks(new_query4audit("select id from tbl"), catalog, ["CLA.001", "CLA.014", "CLA.015"])
        assert calls == []

    def test_partially_ignored_check_still_runs(self, catalog):
        findings = run_heuristic_checks(new_query4audit("select id from tbl"), catalog, ["CLA.014"])
        assert set(findings) == {"CLA.001"}

    def test_nothing_without_ast(self, catalog):
        assert run_heuristic_checks(Query4Audit(query="select id from tbl"), catalog) == {}
