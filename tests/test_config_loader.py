"""Tests for loading ``mkdocs.yml``-style site configuration."""

from __future__ import annotations

import typing as typ

import pytest

from kb_pages.config import (
    ConfigError,
    NavNode,
    PluginConfig,
    PythonName,
    load_site_config,
)

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path

PAGES = {"index.md": "# Home\n", "php/index.md": "# PHP\n"}


def test_minimal_config_uses_defaults(
    write_site: cabc.Callable[..., Path], tmp_path: Path
) -> None:
    config_path = write_site(
        """
        site_name: Knowledge Base
        nav:
          - Home: index.md
        """,
        PAGES,
    )

    site = load_site_config(config_path)

    assert site.site_name == "Knowledge Base"
    assert site.config_path == config_path.resolve()
    assert site.content_root == (tmp_path / "docs").resolve()
    assert site.output_dir == (tmp_path / "site").resolve()
    assert site.plugins == (PluginConfig(name="search"),)
    assert site.use_directory_urls is True
    assert site.theme.name == "material"
    assert site.edit_uri is None


def test_nested_nav_is_parsed_in_declared_order(
    write_site: cabc.Callable[..., Path],
) -> None:
    config_path = write_site(
        """
        site_name: KB
        nav:
          - Home: index.md
          - PHP:
              - Index: php/index.md
              - https://www.php.net/manual/
          - Docs: https://example.com/docs
        """,
        PAGES,
    )

    site = load_site_config(config_path)

    home, php, docs = site.nav
    assert home == NavNode(label="Home", path="index.md")
    assert php.is_section
    assert php.children[0] == NavNode(label="Index", path="php/index.md")
    assert php.children[1].is_link
    assert docs == NavNode(label="Docs", url="https://example.com/docs")


def test_loading_twice_yields_equal_configs(
    write_site: cabc.Callable[..., Path],
) -> None:
    config_path = write_site(
        """
        site_name: KB
        nav:
          - Home: index.md
          - PHP:
              - Index: php/index.md
        theme:
          name: material
          features: [navigation.indexes, content.code.copy]
        """,
        PAGES,
    )

    assert load_site_config(config_path) == load_site_config(config_path)


def test_missing_site_name_names_the_key(
    write_site: cabc.Callable[..., Path],
) -> None:
    config_path = write_site("nav:\n  - index.md\n", PAGES)

    with pytest.raises(ConfigError) as excinfo:
        load_site_config(config_path)

    assert excinfo.value.key == "site_name"


@pytest.mark.parametrize(
    ("nav_yaml", "expected_key"),
    [
        ("  - Home: index.md\n  - PHP:\n      - 42\n", "nav[1].PHP[0]"),
        ("  - Home: index.md\n    Other: other.md\n", "nav[0]"),
        ("  - Home: 3\n", "nav[0].Home"),
        ("  - ''\n", "nav[0]"),
    ],
)
def test_malformed_nav_entries_name_the_entry(
    write_site: cabc.Callable[..., Path], nav_yaml: str, expected_key: str
) -> None:
    config_path = write_site("site_name: KB\nnav:\n" + nav_yaml, PAGES)

    with pytest.raises(ConfigError) as excinfo:
        load_site_config(config_path)

    assert excinfo.value.key == expected_key
    assert str(excinfo.value).startswith(f"{expected_key}: ")


def test_missing_config_file_is_a_config_error(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="not found"):
        load_site_config(tmp_path / "mkdocs.yml")


def test_undecodable_config_file_is_a_config_error(tmp_path: Path) -> None:
    config_path = tmp_path / "mkdocs.yml"
    config_path.write_bytes(b"site_name: K\xff\xfeB\n")

    with pytest.raises(ConfigError, match="Cannot read") as excinfo:
        load_site_config(config_path)

    assert excinfo.value.key is None
    assert isinstance(excinfo.value.__cause__, UnicodeDecodeError)


def test_invalid_yaml_reports_the_line(write_site: cabc.Callable[..., Path]) -> None:
    config_path = write_site("site_name: KB\nnav: [index.md\n", PAGES)

    with pytest.raises(ConfigError, match="line"):
        load_site_config(config_path)


def test_python_name_tags_are_kept_as_references(
    write_site: cabc.Callable[..., Path],
) -> None:
    config_path = write_site(
        """
        site_name: KB
        nav:
          - index.md
        markdown_extensions:
          - pymdownx.emoji:
              emoji_index: !!python/name:material.extensions.emoji.twemoji
              emoji_generator: !!python/name:material.extensions.emoji.to_svg
        """,
        PAGES,
    )

    site = load_site_config(config_path)

    (emoji,) = site.markdown_extensions
    assert emoji.name == "pymdownx.emoji"
    assert emoji.options["emoji_index"] == PythonName(
        "material.extensions.emoji.twemoji"
    )
    assert emoji.options["emoji_generator"] == PythonName(
        "material.extensions.emoji.to_svg"
    )


def test_duplicate_extensions_merge_at_first_position(
    write_site: cabc.Callable[..., Path],
) -> None:
    config_path = write_site(
        """
        site_name: KB
        nav:
          - index.md
        markdown_extensions:
          - attr_list
          - toc:
              permalink: true
          - pymdownx.snippets
          - attr_list
          - pymdownx.snippets:
              check_paths: true
        """,
        PAGES,
    )

    site = load_site_config(config_path)

    names = [extension.name for extension in site.markdown_extensions]
    assert names == ["attr_list", "toc", "pymdownx.snippets"]
    assert site.markdown_extensions[2].options == {"check_paths": True}


def test_directory_aliases_and_overrides(
    write_site: cabc.Callable[..., Path], tmp_path: Path
) -> None:
    config_path = write_site(
        """
        site_name: KB
        docs_dir: content
        site_dir: public
        nav:
          - index.md
        """
    )

    site = load_site_config(config_path)
    assert site.content_root == (tmp_path / "content").resolve()
    assert site.output_dir == (tmp_path / "public").resolve()

    overridden = load_site_config(
        config_path, output_dir=tmp_path / "out", content_root=tmp_path / "docs"
    )
    assert overridden.output_dir == (tmp_path / "out").resolve()
    assert overridden.content_root == (tmp_path / "docs").resolve()


def test_nav_is_derived_from_content_when_absent(
    write_site: cabc.Callable[..., Path],
) -> None:
    config_path = write_site(
        "site_name: KB\n",
        {
            "index.md": "# Home\n",
            "guide.md": "# Guide\n",
            "php/index.md": "# PHP\n",
            "php/di.md": "# DI\n",
            ".hidden/secret.md": "# Secret\n",
            "img/logo.png": "png",
        },
    )

    site = load_site_config(config_path)

    assert [node.path for node in site.nav[:2]] == ["index.md", "guide.md"]
    section = site.nav[2]
    assert section.label == "Php"
    assert [child.path for child in section.children] == ["php/index.md", "php/di.md"]
    assert len(site.nav) == 3


def test_theme_options_are_parsed(write_site: cabc.Callable[..., Path]) -> None:
    config_path = write_site(
        """
        site_name: KB
        nav:
          - index.md
        repo_url: https://github.com/example/kb
        copyright: Copyright &copy; 2024 Example
        theme:
          name: material
          features:
            - navigation.footer
            - content.action.edit
          palette:
            - media: "(prefers-color-scheme: light)"
              scheme: default
              primary: teal
              toggle:
                icon: material/weather-night
                name: Switch to dark mode
            - media: "(prefers-color-scheme: dark)"
              scheme: slate
          font: false
          icon:
            admonition:
              note: octicons/tag-16
        """,
        PAGES,
    )

    site = load_site_config(config_path)

    assert site.theme.has_feature("navigation.footer")
    assert not site.theme.has_feature("navigation.top")
    light, dark = site.theme.palette
    assert light.primary == "teal"
    assert light.toggle_name == "Switch to dark mode"
    assert dark.scheme == "slate"
    assert site.theme.font is None
    assert site.theme.admonition_icons == {"note": "octicons/tag-16"}
    assert site.edit_uri == "edit/master/docs/"
    assert site.copyright == "Copyright &copy; 2024 Example"


def test_theme_features_must_be_a_list(write_site: cabc.Callable[..., Path]) -> None:
    config_path = write_site(
        "site_name: KB\nnav: [index.md]\ntheme:\n  features: navigation.top\n",
        PAGES,
    )

    with pytest.raises(ConfigError) as excinfo:
        load_site_config(config_path)

    assert excinfo.value.key == "theme.features"


def test_use_directory_urls_must_be_boolean(
    write_site: cabc.Callable[..., Path],
) -> None:
    config_path = write_site(
        "site_name: KB\nnav: [index.md]\nuse_directory_urls: sometimes\n", PAGES
    )

    with pytest.raises(ConfigError) as excinfo:
        load_site_config(config_path)

    assert excinfo.value.key == "use_directory_urls"


def test_empty_plugin_list_disables_search(
    write_site: cabc.Callable[..., Path],
) -> None:
    config_path = write_site("site_name: KB\nnav: [index.md]\nplugins: []\n", PAGES)

    assert load_site_config(config_path).plugins == ()
