# tests/test_distribution.py

import zipfile
from datetime import date
from pathlib import Path

import pytest

from xsdpack.config import config_from_dict
from xsdpack.distribution import build_dist_archive, build_docs_archive, expand_placeholders
from xsdpack.enums import Classifier, DuplicatesStrategy
from xsdpack.errors import DuplicateDestinationError, MissingResourceError
from xsdpack.orchestrator import ArchiveTaskConfig, SimpleReporter, run_dist_zip, run_docs_zip, run_schema_zip

BASE = "spring-framework-5.2.0"


def write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def names(path: Path) -> list[str]:
    with zipfile.ZipFile(path) as zf:
        return zf.namelist()


@pytest.fixture
def project_root(tmp_path):
    beans = tmp_path / "spring-beans" / "src" / "main" / "resources"
    write(
        beans / "META-INF" / "spring.schemas",
        "http\\://www.springframework.org/schema/beans/spring-beans.xsd="
        "org/springframework/beans/factory/xml/spring-beans.xsd\n"
        "http\\://www.springframework.org/schema/beans/spring-beans-4.3.xsd="
        "org/springframework/beans/factory/xml/spring-beans.xsd\n"
        "http\\://www.springframework.org/schema/util/spring-util.xsd="
        "org/springframework/beans/factory/xml/spring-util.xsd\n",
    )
    write(beans / "org" / "springframework" / "beans" / "factory" / "xml" / "spring-beans.xsd", "<beans/>")
    write(beans / "org" / "springframework" / "beans" / "factory" / "xml" / "spring-util.xsd", "<util/>")

    context = tmp_path / "spring-context" / "src" / "main" / "resources"
    write(
        context / "META-INF" / "spring.schemas",
        "http\\://www.springframework.org/schema/context/spring-context.xsd="
        "org/springframework/context/config/spring-context.xsd\n",
    )
    write(context / "org" / "springframework" / "context" / "config" / "spring-context.xsd", "<context/>")

    write(tmp_path / "spring-beans" / "build" / "libs" / "spring-beans-5.2.0.jar", "jar")
    write(tmp_path / "spring-beans" / "build" / "libs" / "spring-beans-5.2.0-sources.jar", "sources")

    write(tmp_path / "src" / "dist" / "changelog.txt", "Changes in 5.2.0")
    write(tmp_path / "build" / "docs" / "javadoc" / "index.html", "api")
    write(tmp_path / "build" / "docs" / "javadoc" / "org" / "Beans.html", "beans api")
    write(tmp_path / "build" / "docs" / "ref-docs" / "html5" / "index.html", "reference")

    write(tmp_path / "src" / "docs" / "dist" / "readme.txt", "Spring Framework ${version}\nCopyright ${copyright}\n")
    write(tmp_path / "src" / "docs" / "dist" / "license.txt", "Apache License ${unknown}\n")
    write(tmp_path / "src" / "docs" / "dist" / "notice.txt", "Notice\n")
    return tmp_path


@pytest.fixture
def project(project_root):
    data = {
        "project": {"name": "spring-framework", "version": "5.2.0"},
        "modules": [
            {"name": "spring-core"},
            {
                "name": "spring-beans",
                "jar": "spring-beans/build/libs/spring-beans-5.2.0.jar",
                "sources_jar": "spring-beans/build/libs/spring-beans-5.2.0-sources.jar",
            },
            {"name": "spring-context"},
        ],
    }
    return config_from_dict(data, project_root)


class TestExpandPlaceholders:
    def test_known_and_unknown(self):
        text = "v${version} c${copyright} ${other} $version"
        assert expand_placeholders(text, {"version": "5.2", "copyright": "2019"}) == "v5.2 c2019 ${other} $version"


class TestSchemaZip:
    def test_layout(self, project):
        result = run_schema_zip(ArchiveTaskConfig(project=project), SimpleReporter())

        assert result.path.name == "spring-framework-5.2.0-schema.zip"
        assert names(result.path) == [
            "beans/spring-beans.xsd",
            "util/spring-util.xsd",
            "context/spring-context.xsd",
        ]
        assert result.entries == 3
        assert "[OK]" in result.human_summary()

    def test_versioned_keys_collide_under_error_policy(self, project):
        cfg = ArchiveTaskConfig(project=project, duplicates=DuplicatesStrategy.error)

        with pytest.raises(DuplicateDestinationError, match="beans/spring-beans.xsd"):
            run_schema_zip(cfg, SimpleReporter())
        assert not cfg.archive_path(Classifier.schema).exists()

    def test_config_policy_used_when_no_override(self, project):
        project.schemas.duplicates = DuplicatesStrategy.error

        with pytest.raises(DuplicateDestinationError):
            run_schema_zip(ArchiveTaskConfig(project=project), SimpleReporter())

    def test_out_dir_override(self, project, tmp_path):
        out = tmp_path / "custom"
        result = run_schema_zip(ArchiveTaskConfig(project=project, out_dir=out), SimpleReporter())

        assert result.path == out / "spring-framework-5.2.0-schema.zip"
        assert result.path.is_file()

    def test_dry_run_writes_nothing(self, project, capsys):
        result = run_schema_zip(ArchiveTaskConfig(project=project, dry_run=True), SimpleReporter())

        assert not result.written
        assert not result.path.exists()
        assert "[plan] context/spring-context.xsd" in capsys.readouterr().out

    def test_missing_xsd_aborts(self, project, project_root):
        resources = project_root / "spring-context" / "src" / "main" / "resources"
        (resources / "org" / "springframework" / "context" / "config" / "spring-context.xsd").unlink()

        with pytest.raises(MissingResourceError, match="spring-context"):
            run_schema_zip(ArchiveTaskConfig(project=project), SimpleReporter())

    def test_parent_segment_in_key_aborts(self, project, project_root):
        resources = project_root / "spring-context" / "src" / "main" / "resources"
        with (resources / "META-INF" / "spring.schemas").open("a", encoding="utf-8") as f:
            f.write("http\\://x/schema/../../etc/spring-x.xsd=org/springframework/context/config/spring-context.xsd\n")

        with pytest.raises(ValueError, match="escapes the archive root"):
            run_schema_zip(ArchiveTaskConfig(project=project), SimpleReporter())
        assert not project.archive_path("schema").exists()


class TestDocsZip:
    def test_layout(self, project):
        result = run_docs_zip(ArchiveTaskConfig(project=project), SimpleReporter())

        assert result.path.name == "spring-framework-5.2.0-docs.zip"
        assert names(result.path) == [
            "changelog.txt",
            "javadoc-api/index.html",
            "javadoc-api/org/Beans.html",
            "spring-framework-reference/index.html",
        ]

    def test_optional_sections_included_when_present(self, project, project_root):
        write(project_root / "build" / "docs" / "ref-docs" / "pdf" / "spring-framework-reference.pdf", "pdf")
        write(project_root / "build" / "docs" / "kdoc" / "index.html", "kdoc")

        archive = build_docs_archive(project)

        assert "spring-framework-reference/pdf/spring-framework-reference.pdf" in archive
        assert "kdoc-api/index.html" in archive

    def test_required_section_missing(self, project, project_root):
        import shutil

        shutil.rmtree(project_root / "build" / "docs" / "javadoc")

        with pytest.raises(FileNotFoundError, match="javadoc-api"):
            build_docs_archive(project)

    def test_missing_changelog_is_skipped(self, project, project_root):
        (project_root / "src" / "dist" / "changelog.txt").unlink()

        archive = build_docs_archive(project)

        assert "changelog.txt" not in archive


class TestDistZip:
    def test_builds_prerequisites_and_layout(self, project):
        result = run_dist_zip(ArchiveTaskConfig(project=project), SimpleReporter())

        assert result.path.name == "spring-framework-5.2.0-dist.zip"
        assert (result.path.parent / "spring-framework-5.2.0-docs.zip").is_file()
        assert (result.path.parent / "spring-framework-5.2.0-schema.zip").is_file()
        assert names(result.path) == [
            f"{BASE}/readme.txt",
            f"{BASE}/license.txt",
            f"{BASE}/notice.txt",
            f"{BASE}/docs/changelog.txt",
            f"{BASE}/docs/javadoc-api/index.html",
            f"{BASE}/docs/javadoc-api/org/Beans.html",
            f"{BASE}/docs/spring-framework-reference/index.html",
            f"{BASE}/schema/beans/spring-beans.xsd",
            f"{BASE}/schema/util/spring-util.xsd",
            f"{BASE}/schema/context/spring-context.xsd",
            f"{BASE}/libs/spring-beans-5.2.0.jar",
            f"{BASE}/libs/spring-beans-5.2.0-sources.jar",
        ]

    def test_templates_expanded(self, project, tmp_path):
        docs = run_docs_zip(ArchiveTaskConfig(project=project), SimpleReporter()).path
        schema = run_schema_zip(ArchiveTaskConfig(project=project), SimpleReporter()).path

        archive = build_dist_archive(project, docs, schema, today=date(2019, 9, 30))
        out = archive.write(tmp_path / "dist.zip")

        with zipfile.ZipFile(out) as zf:
            readme = zf.read(f"{BASE}/readme.txt").decode("utf-8")
            license_text = zf.read(f"{BASE}/license.txt").decode("utf-8")
        assert readme == "Spring Framework 5.2.0\nCopyright 2019\n"
        assert license_text == "Apache License ${unknown}\n"

    def test_rebuilds_prerequisites_every_run(self, project, project_root):
        run_schema_zip(ArchiveTaskConfig(project=project), SimpleReporter())
        run_docs_zip(ArchiveTaskConfig(project=project), SimpleReporter())

        resources = project_root / "spring-context" / "src" / "main" / "resources"
        with (resources / "META-INF" / "spring.schemas").open("a", encoding="utf-8") as f:
            f.write(
                "http\\://www.springframework.org/schema/task/spring-task.xsd="
                "org/springframework/scheduling/spring-task.xsd\n"
            )
        write(resources / "org" / "springframework" / "scheduling" / "spring-task.xsd", "<task/>")
        write(project_root / "build" / "docs" / "javadoc" / "org" / "Task.html", "task api")

        result = run_dist_zip(ArchiveTaskConfig(project=project), SimpleReporter())

        entries = names(result.path)
        assert f"{BASE}/schema/task/spring-task.xsd" in entries
        assert f"{BASE}/docs/javadoc-api/org/Task.html" in entries
        assert "task/spring-task.xsd" in names(result.path.parent / "spring-framework-5.2.0-schema.zip")

    def test_missing_template(self, project, project_root):
        (project_root / "src" / "docs" / "dist" / "notice.txt").unlink()

        with pytest.raises(FileNotFoundError, match="notice.txt"):
            run_dist_zip(ArchiveTaskConfig(project=project), SimpleReporter())

    def test_missing_jar(self, project, project_root):
        (project_root / "spring-beans" / "build" / "libs" / "spring-beans-5.2.0.jar").unlink()

        with pytest.raises(FileNotFoundError, match="spring-beans: artifact not found"):
            run_dist_zip(ArchiveTaskConfig(project=project), SimpleReporter())

    def test_dry_run(self, project, capsys):
        result = run_dist_zip(ArchiveTaskConfig(project=project, dry_run=True), SimpleReporter())

        out = capsys.readouterr().out
        assert not result.path.parent.exists()
        assert f"[plan] {BASE}/libs/spring-beans-5.2.0.jar" in out
        assert f"[plan] {BASE}/readme.txt" in out
