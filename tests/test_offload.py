"""Tests for worker_offload.offload — print order, tag and inline rewrites."""

from pathlib import Path

import pytest

from worker_offload import __version__
from worker_offload.config import OffloadConfig
from worker_offload.hooks import Filters
from worker_offload.offload import PARTYTOWN_TYPE, WorkerOffloading
from worker_offload.registry import FOOTER, HEAD, ScriptRegistry

BOOTSTRAP = "web-worker-offloading"


@pytest.fixture
def registry() -> ScriptRegistry:
    reg = ScriptRegistry()
    reg.add("h", "x.js")
    reg.add("plain", "plain.js")
    reg.add("gtag", "gtag.js", in_footer=True)
    reg.add_data("gtag", "worker", True)
    return reg


@pytest.fixture
def offloading(registry: ScriptRegistry, tmp_path: Path) -> WorkerOffloading:
    (tmp_path / "partytown.js").write_text("/* pt */", encoding="utf-8")
    return WorkerOffloading(registry, OffloadConfig(build_dir=tmp_path))


class TestFilterPrintScripts:
    def test_no_offloaded_handles_returns_input(self, offloading: WorkerOffloading) -> None:
        handles = ["h", "plain"]
        assert offloading.filter_print_scripts(handles) is handles
        assert handles == ["h", "plain"]

    def test_prepends_bootstrap(self, offloading: WorkerOffloading) -> None:
        offloading.install()
        assert offloading.filter_print_scripts(["h", "gtag", "plain"]) == [
            BOOTSTRAP,
            "h",
            "gtag",
            "plain",
        ]

    def test_bootstrap_moved_to_head(
        self, offloading: WorkerOffloading, registry: ScriptRegistry
    ) -> None:
        offloading.install()
        registry.set_group(BOOTSTRAP, FOOTER)
        offloading.filter_print_scripts(["gtag"])
        assert registry.get(BOOTSTRAP).group == HEAD  # type: ignore[union-attr]

    def test_bootstrap_not_duplicated(self, offloading: WorkerOffloading) -> None:
        result = offloading.filter_print_scripts(["h", BOOTSTRAP, "gtag"])
        assert result == [BOOTSTRAP, "h", "gtag"]
        assert result.count(BOOTSTRAP) == 1

    def test_bootstrap_alone_is_not_a_trigger(self, offloading: WorkerOffloading) -> None:
        handles = [BOOTSTRAP, "plain"]
        assert offloading.filter_print_scripts(handles) is handles

    def test_accepts_tuples(self, offloading: WorkerOffloading) -> None:
        assert offloading.filter_print_scripts(("gtag",)) == [BOOTSTRAP, "gtag"]

    def test_prepends_even_without_registered_bootstrap(self, registry: ScriptRegistry) -> None:
        stage = WorkerOffloading(registry)
        assert stage.filter_print_scripts(["gtag"]) == [BOOTSTRAP, "gtag"]


class TestUpdateScriptType:
    def test_not_offloaded_returns_input(self, offloading: WorkerOffloading) -> None:
        tag = '<script src="x.js" id="h-js"></script>\n'
        assert offloading.update_script_type(tag, "h") is tag

    def test_unknown_handle_returns_input(self, offloading: WorkerOffloading) -> None:
        tag = '<script src="x.js" id="nope-js"></script>'
        assert offloading.update_script_type(tag, "nope") is tag

    def test_offloaded_tag_gets_partytown_type(
        self, offloading: WorkerOffloading, registry: ScriptRegistry
    ) -> None:
        registry.set_worker("h")
        tag = '<script id="h-js" src="x.js"></script>'
        assert offloading.update_script_type(tag, "h") == (
            '<script type="text/partytown" id="h-js" src="x.js"></script>'
        )

    def test_existing_type_is_replaced(
        self, offloading: WorkerOffloading, registry: ScriptRegistry
    ) -> None:
        registry.set_worker("h")
        tag = '<script type="text/javascript" id="h-js" src="x.js"></script>'
        assert offloading.update_script_type(tag, "h") == (
            '<script type="text/partytown" id="h-js" src="x.js"></script>'
        )

    def test_second_application_is_a_no_op(
        self, offloading: WorkerOffloading, registry: ScriptRegistry
    ) -> None:
        registry.set_worker("h")
        once = offloading.update_script_type('<script id="h-js" src="x.js"></script>', "h")
        assert offloading.update_script_type(once, "h") == once
        assert once.count(PARTYTOWN_TYPE) == 1

    def test_only_matching_id_is_rewritten(
        self, offloading: WorkerOffloading, registry: ScriptRegistry
    ) -> None:
        registry.set_worker("h")
        tag = (
            '<script id="h-js-before">\nwindow.a = 1;\n</script>\n'
            '<script src="x.js" id="h-js"></script>\n'
            '<script id="other-js" src="o.js"></script>\n'
        )
        assert offloading.update_script_type(tag, "h") == (
            '<script id="h-js-before">\nwindow.a = 1;\n</script>\n'
            '<script type="text/partytown" src="x.js" id="h-js"></script>\n'
            '<script id="other-js" src="o.js"></script>\n'
        )

    def test_no_matching_element_returns_input(
        self, offloading: WorkerOffloading, registry: ScriptRegistry
    ) -> None:
        registry.set_worker("h")
        tag = '<script id="other-js" src="x.js"></script>'
        assert offloading.update_script_type(tag, "h") is tag

    def test_non_string_returned_unchanged(self, offloading: WorkerOffloading) -> None:
        sentinel = object()
        assert offloading.update_script_type(sentinel, "gtag") is sentinel
        assert offloading.update_script_type(None, "gtag") is None

    def test_extra_arguments_ignored(self, offloading: WorkerOffloading) -> None:
        tag = '<script src="gtag.js" id="gtag-js"></script>'
        assert 'type="text/partytown"' in offloading.update_script_type(tag, "gtag", "gtag.js")


class TestFilterInlineScriptAttributes:
    @pytest.mark.parametrize("suffix", ["before", "after"])
    def test_offloaded_inline_blocks_marked(
        self, offloading: WorkerOffloading, suffix: str
    ) -> None:
        attributes = {"id": f"gtag-js-{suffix}"}
        assert offloading.filter_inline_script_attributes(attributes) == {
            "id": f"gtag-js-{suffix}",
            "type": PARTYTOWN_TYPE,
        }
        assert attributes == {"id": f"gtag-js-{suffix}"}

    def test_existing_type_overwritten(self, offloading: WorkerOffloading) -> None:
        result = offloading.filter_inline_script_attributes(
            {"type": "text/javascript", "id": "gtag-js-after"}
        )
        assert result == {"type": PARTYTOWN_TYPE, "id": "gtag-js-after"}

    def test_handle_with_dashes(
        self, offloading: WorkerOffloading, registry: ScriptRegistry
    ) -> None:
        registry.add("my-tag-js", "m.js")
        registry.set_worker("my-tag-js")
        result = offloading.filter_inline_script_attributes({"id": "my-tag-js-js-before"})
        assert result["type"] == PARTYTOWN_TYPE

    def test_not_offloaded_returns_input(self, offloading: WorkerOffloading) -> None:
        attributes = {"id": "plain-js-after"}
        assert offloading.filter_inline_script_attributes(attributes) is attributes

    @pytest.mark.parametrize(
        "attributes",
        [
            {},
            {"id": "gtag-js"},
            {"id": "gtag-js-middle"},
            {"id": "-js-before"},
            {"id": 42},
        ],
    )
    def test_non_matching_ids_return_input(
        self, offloading: WorkerOffloading, attributes: dict
    ) -> None:
        assert offloading.filter_inline_script_attributes(attributes) is attributes

    def test_non_mapping_returned_unchanged(self, offloading: WorkerOffloading) -> None:
        assert offloading.filter_inline_script_attributes(None) is None


class TestGeneratorMetaTag:
    def test_names_plugin_and_version(self, offloading: WorkerOffloading) -> None:
        assert offloading.generator_meta_tag() == (
            f'<meta name="generator" content="web-worker-offloading {__version__}">\n'
        )


class TestInstall:
    def test_registers_bootstrap_and_stages(
        self, offloading: WorkerOffloading, registry: ScriptRegistry
    ) -> None:
        assert offloading.install() is True
        assert BOOTSTRAP in registry
        for name in ("print_scripts", "script_tag", "inline_script_attributes"):
            assert offloading.filters.has(name)

    def test_missing_asset_still_attaches_stages(self, registry: ScriptRegistry, tmp_path: Path) -> None:
        offloading = WorkerOffloading(registry, OffloadConfig(build_dir=tmp_path / "missing"))
        assert offloading.install() is False
        assert BOOTSTRAP not in registry
        assert offloading.filters.has("script_tag")

    def test_print_order_stage_runs_last(self, offloading: WorkerOffloading) -> None:
        filters = offloading.filters
        filters.add("print_scripts", lambda handles: [*handles, "gtag"], priority=1000)
        offloading.install()
        assert filters.apply("print_scripts", ["h"]) == [BOOTSTRAP, "h", "gtag"]

    def test_uses_given_filters(self, registry: ScriptRegistry, tmp_path: Path) -> None:
        (tmp_path / "partytown.js").write_text("/* pt */", encoding="utf-8")
        filters = Filters()
        filters.add("configuration", lambda cfg: {**cfg, "foo": 1})
        offloading = WorkerOffloading(registry, OffloadConfig(build_dir=tmp_path), filters)
        offloading.install()
        assert offloading.filters is filters
        assert '"foo":1' in registry.get(BOOTSTRAP).before[0]  # type: ignore[union-attr]

    def test_undecodable_asset_does_not_raise(
        self, registry: ScriptRegistry, tmp_path: Path
    ) -> None:
        (tmp_path / "partytown.js").write_bytes(b"/* \xff\xfe */")
        offloading = WorkerOffloading(registry, OffloadConfig(build_dir=tmp_path))
        assert offloading.install() is False
        assert BOOTSTRAP not in registry
        assert offloading.filters.has("script_tag")

    def test_repeated_install_attaches_stages_once(self, offloading: WorkerOffloading) -> None:
        assert offloading.install() is True
        assert offloading.install() is False
        offloading.uninstall()
        for name in ("print_scripts", "script_tag", "inline_script_attributes"):
            assert not offloading.filters.has(name)

    def test_reinstall_after_uninstall(self, offloading: WorkerOffloading) -> None:
        offloading.install()
        offloading.uninstall()
        offloading.install()
        assert offloading.filters.apply("print_scripts", ["gtag"]) == [BOOTSTRAP, "gtag"]

    def test_uninstall(self, offloading: WorkerOffloading) -> None:
        offloading.install()
        offloading.uninstall()
        for name in ("print_scripts", "script_tag", "inline_script_attributes"):
            assert not offloading.filters.has(name)
