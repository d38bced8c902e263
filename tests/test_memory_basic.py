"""
Tests for memory parsing and the environment memory summary.
"""

from types import SimpleNamespace

import pytest

from acasched.memory import app_memory, parse_memory, summarize_memory


def _container(memory, cpu):
    return SimpleNamespace(resources=SimpleNamespace(memory=memory, cpu=cpu))


def _app(name, containers, min_replicas=None):
    return SimpleNamespace(
        name=name,
        template=SimpleNamespace(containers=containers, scale=SimpleNamespace(min_replicas=min_replicas)),
    )


class TestParseMemory:
    """Test memory quantity parsing."""

    @pytest.mark.parametrize("text, expected", [
        ("0.5Gi", 0.5),
        ("1Gi", 1.0),
        ("2.0Gi", 2.0),
        ("512Mi", 0.5),
        (" 4 Gi ", 4.0),
        ("1048576Ki", 1.0),
        ("1Ti", 1024.0),
        ("1073741824", 1.0),
        ("1gi", 1.0),
    ])
    def test_valid_values(self, text, expected):
        assert parse_memory(text) == pytest.approx(expected)

    def test_decimal_units(self):
        assert parse_memory("1G") == pytest.approx(1e9 / 1024 ** 3)
        assert parse_memory("500M") == pytest.approx(5e8 / 1024 ** 3)

    @pytest.mark.parametrize("text", ["", "Gi", "abc", "1Xi", "1.5 GB", "-1Gi", None])
    def test_invalid_values(self, text):
        with pytest.raises(ValueError):
            parse_memory(text)


class TestSummarizeMemory:
    """Test per-app and environment totals."""

    def test_app_memory_sums_containers(self):
        app = _app("api", [_container("1Gi", 0.5), _container("512Mi", 0.25)], min_replicas=2)
        usage = app_memory(app)

        assert usage.containers == 2
        assert usage.memory_gib == pytest.approx(1.5)
        assert usage.cpu_cores == pytest.approx(0.75)
        assert usage.min_replicas == 2
        assert usage.memory_at_min_replicas_gib == pytest.approx(3.0)

    def test_app_without_template(self):
        usage = app_memory(SimpleNamespace(name="bare", template=None))
        assert usage.containers == 0
        assert usage.memory_gib == 0
        assert usage.min_replicas == 0

    def test_environment_totals(self):
        apps = [
            _app("api", [_container("2Gi", 1.0)], min_replicas=1),
            _app("worker", [_container("0.5Gi", 0.25)]),
        ]
        report = summarize_memory(apps, "env1")

        assert report.total_memory_gib == pytest.approx(2.5)
        assert report.total_cpu_cores == pytest.approx(1.25)
        assert report.total_memory_at_min_replicas_gib == pytest.approx(2.0)
        assert report.to_dict()["total_memory_gib"] == 2.5

    def test_unparseable_app_is_skipped(self):
        apps = [_app("ok", [_container("1Gi", 0.5)]), _app("broken", [_container("lots", 0.5)])]
        report = summarize_memory(apps, "env1")

        assert [a.name for a in report.apps] == ["ok"]
        assert "broken" in report.skipped
        assert report.total_memory_gib == pytest.approx(1.0)
