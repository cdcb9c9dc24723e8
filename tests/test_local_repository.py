from __future__ import annotations

import pytest
from sqlalchemy import inspect

from depgraph.graph.types import Artifact
from depgraph.store.db import create_db, get_engine, get_session
from depgraph.store.repo import LocalRepositoryManager


@pytest.fixture
def manager(tmp_path):
    manager = LocalRepositoryManager(tmp_path / "repo")
    try:
        yield manager
    finally:
        manager.close()


def test_schema_created(tmp_path):
    engine = create_db(get_engine(tmp_path / "repo"))
    assert "resolved_artifacts" in set(inspect(engine).get_table_names())
    assert (tmp_path / "repo" / "depgraph.db").exists()


def test_path_uses_maven_layout(manager, tmp_path):
    artifact = Artifact.parse("com.google.guava:guava:31.1-jre")
    expected = (
        tmp_path / "repo" / "com" / "google" / "guava" / "guava" / "31.1-jre"
        / "guava-31.1-jre.jar"
    )
    assert manager.path_for(artifact) == expected.absolute()

    sources = Artifact.parse("com.google.guava:guava:jar:sources:31.1-jre")
    assert manager.path_for(sources).name == "guava-31.1-jre-sources.jar"


def test_record_and_find(manager):
    artifact = Artifact.parse("com.example:lib:1.0")
    assert manager.find(artifact) is None

    row = manager.record(artifact, "central")
    assert row.coordinates == "com.example:lib:jar:1.0"
    assert row.repository_id == "central"

    again = manager.record(artifact, "maven.google.com")
    assert again.id == row.id
    assert manager.find(artifact).repository_id == "maven.google.com"
    assert len(manager.list_artifacts()) == 1


def test_manager_accepts_existing_session(tmp_path):
    engine = create_db(get_engine(tmp_path / "shared"))
    with get_session(engine) as session:
        manager = LocalRepositoryManager(tmp_path / "shared", session=session)
        manager.record(Artifact.parse("com.example:lib:1.0"))
        assert [r.artifact_id for r in manager.list_artifacts()] == ["lib"]


def test_index_is_created_on_first_use(tmp_path):
    manager = LocalRepositoryManager(tmp_path / "lazy")
    assert not manager.is_open
    assert not (tmp_path / "lazy").exists()

    assert manager.find(Artifact.parse("com.example:lib:1.0")) is None
    assert manager.is_open
    assert (tmp_path / "lazy" / "depgraph.db").exists()
    manager.close()
    assert not manager.is_open


def test_close_disposes_owned_engine(tmp_path):
    manager = LocalRepositoryManager(tmp_path / "repo")
    manager.record(Artifact.parse("com.example:lib:1.0"))
    engine = manager._engine
    assert engine is not None
    manager.close()
    assert manager._engine is None
    assert engine.pool.checkedout() == 0

    # Reopening after close works against the same index.
    assert [r.artifact_id for r in manager.list_artifacts()] == ["lib"]
    manager.close()


def test_close_leaves_supplied_session_open(tmp_path):
    engine = create_db(get_engine(tmp_path / "shared"))
    with get_session(engine) as session:
        manager = LocalRepositoryManager(tmp_path / "shared", session=session)
        manager.close()
        manager.record(Artifact.parse("com.example:lib:1.0"))
        assert manager.session is session
    engine.dispose()
