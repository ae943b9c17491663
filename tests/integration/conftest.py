# tests/integration/conftest.py — v8
"""Shared fixtures for integration tests using testcontainers.

Container lifecycle:
- session scope: containers start once per pytest session
- function scope: fresh collection per test for isolation

Containers are reached through their bridge network IP and internal port,
which also works from inside a devcontainer with docker-outside-of-docker
(the localhost:mapped_port pair returned by testcontainers does not).

Changelog:
    v8: ChromaDB and Ollama only; mocks come from tests/conftest.py.
    v7: Fix ChromaDB wait_for_logs regex ("######" banner for chroma 1.0.0).
        Fix exec_run: remove unsupported 'timeout' kwarg from docker-py.
"""

from __future__ import annotations

import logging
import time
import uuid

import pytest

logger = logging.getLogger(__name__)


# ── Pytest markers ──────────────────────────────────────────────

def pytest_configure(config):
    config.addinivalue_line("markers", "slow: marks tests that require model download (Ollama)")
    config.addinivalue_line("markers", "chromadb: marks tests requiring ChromaDB container")
    config.addinivalue_line("markers", "ollama: marks tests requiring Ollama container")


# =====================================================================
#  DEVCONTAINER NETWORKING HELPERS
# =====================================================================

def _get_container_bridge_ip(container, max_attempts: int = 10) -> str:
    """Get container bridge network IP with retries."""
    for attempt in range(max_attempts):
        try:
            wrapped = container.get_wrapped_container()
            wrapped.reload()
            networks = wrapped.attrs.get("NetworkSettings", {}).get("Networks", {})
            for net_name, net_info in networks.items():
                ip = net_info.get("IPAddress", "")
                if ip:
                    logger.info(
                        "Container %s IP: %s (network: %s, attempt %d)",
                        wrapped.short_id, ip, net_name, attempt + 1,
                    )
                    return ip
            logger.debug("Container IP empty, attempt %d/%d", attempt + 1, max_attempts)
        except Exception as e:
            logger.debug("Error getting IP (attempt %d): %s", attempt + 1, e)
        time.sleep(0.5)

    raise RuntimeError(
        f"Could not obtain container bridge IP after {max_attempts} attempts"
    )


def _docker_available() -> bool:
    """Check if Docker daemon is reachable."""
    try:
        import docker
        client = docker.from_env()
        client.ping()
        return True
    except Exception:
        return False


# =====================================================================
#  CHROMADB CONTAINER — session scope (bridge IP)
# =====================================================================

CHROMADB_IMAGE = "chromadb/chroma:1.5.0"
CHROMADB_INTERNAL_PORT = 8000


@pytest.fixture(scope="session")
def chromadb_container():
    if not _docker_available():
        pytest.skip("Docker not available")
    pytest.importorskip("testcontainers")

    from testcontainers.core.container import DockerContainer
    from testcontainers.core.waiting_utils import wait_for_logs

    container = (
        DockerContainer(CHROMADB_IMAGE)
        .with_exposed_ports(CHROMADB_INTERNAL_PORT)
    )
    container.start()

    # Hash banner first, then give uvicorn time to bind
    wait_for_logs(container, predicate=r"######", timeout=120)
    time.sleep(3)

    ip = _get_container_bridge_ip(container)
    logger.info("ChromaDB ready at %s:%d", ip, CHROMADB_INTERNAL_PORT)
    yield {"host": ip, "port": CHROMADB_INTERNAL_PORT}
    container.stop()


@pytest.fixture
def chromadb_collection() -> str:
    return f"test_{uuid.uuid4().hex[:8]}"


@pytest.fixture
def chromadb_url(chromadb_container) -> str:
    return f"http://{chromadb_container['host']}:{chromadb_container['port']}"


# =====================================================================
#  OLLAMA CONTAINER — session scope (slow: model pull, bridge IP)
#
#  exec_run() in docker-py does NOT support 'timeout' kwarg.
# =====================================================================

OLLAMA_IMAGE = "ollama/ollama:latest"
OLLAMA_INTERNAL_PORT = 11434
OLLAMA_LLM_MODEL = "qwen2.5:0.5b"
OLLAMA_EMBED_MODEL = "nomic-embed-text"


@pytest.fixture(scope="session")
def ollama_container():
    if not _docker_available():
        pytest.skip("Docker not available")
    pytest.importorskip("testcontainers")

    from testcontainers.core.container import DockerContainer
    from testcontainers.core.waiting_utils import wait_for_logs

    container = (
        DockerContainer(OLLAMA_IMAGE)
        .with_exposed_ports(OLLAMA_INTERNAL_PORT)
    )
    container.start()

    wait_for_logs(container, predicate=r"Listening on", timeout=60)
    time.sleep(1)

    ip = _get_container_bridge_ip(container)
    endpoint = f"http://{ip}:{OLLAMA_INTERNAL_PORT}"
    logger.info("Ollama ready at %s", endpoint)

    logger.info("Pulling Ollama models (this may take several minutes)...")
    wrapped = container.get_wrapped_container()
    for model in [OLLAMA_LLM_MODEL, OLLAMA_EMBED_MODEL]:
        logger.info("  Pulling %s ...", model)
        exit_code, output = wrapped.exec_run(f"ollama pull {model}")
        if exit_code != 0:
            logger.warning("Failed to pull %s: %s", model, output.decode(errors="replace"))

    yield {"endpoint": endpoint, "host": ip, "port": OLLAMA_INTERNAL_PORT}
    container.stop()


@pytest.fixture(scope="session")
def ollama_endpoint(ollama_container) -> str:
    return ollama_container["endpoint"]


@pytest.fixture
def ollama_llm(ollama_endpoint):
    from readnext.llm.adapters.ollama_adapter import OllamaAdapter
    return OllamaAdapter(model=OLLAMA_LLM_MODEL, base_url=ollama_endpoint)


@pytest.fixture
def ollama_embedder(ollama_endpoint):
    from readnext.rag.embeddings.ollama_embedder import OllamaEmbedder
    return OllamaEmbedder(
        model=OLLAMA_EMBED_MODEL, base_url=ollama_endpoint, dimensions=768,
    )
