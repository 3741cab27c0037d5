"""HTTP 服务集成测试。"""

import logging
from io import BytesIO

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from py_image_gateway.core.params import build_path
from py_image_gateway.core.signature import sign_path
from py_image_gateway.exceptions import FetchError
from py_image_gateway.server import SIGNATURE_DISABLED_WARNING, create_app
from tests.conftest import StaticFetcher, create_orchestrator


SOURCE_URL = "https://example.com/photo.png"


@pytest.fixture
def signed_client(static_fetcher, signing_key):
    app = create_app(orchestrator=create_orchestrator(static_fetcher, key=signing_key))
    with TestClient(app) as client:
        yield client


@pytest.fixture
def unsigned_client(static_fetcher):
    app = create_app(orchestrator=create_orchestrator(static_fetcher))
    with TestClient(app) as client:
        yield client


def signed_url(path: str, key: bytes) -> str:
    return f"/{sign_path(path, key)}/{path}"


class TestServer:
    """HTTP 路由测试"""

    def test_healthz(self, unsigned_client):
        """测试存活检查"""
        response = unsigned_client.get("/healthz")
        assert response.status_code == 200
        assert response.text == "OK"

    def test_transform_request(self, signed_client, signing_key):
        """测试完整的签名请求"""
        path = build_path(SOURCE_URL, ["resize:32:16", "format:png"])
        response = signed_client.get(signed_url(path, signing_key))

        assert response.status_code == 200
        assert response.headers["content-type"] == "image/png"
        assert response.headers["cache-control"] == "max-age=31536000, public"
        assert response.headers["content-disposition"] == 'inline; filename="photo.png"'
        with Image.open(BytesIO(response.content)) as img:
            assert img.size == (32, 16)

    def test_invalid_signature(self, signed_client, static_fetcher):
        """测试签名错误返回 403"""
        response = signed_client.get(f"/invalid/{build_path(SOURCE_URL)}")

        assert response.status_code == 403
        assert response.text == "Invalid signature"
        assert static_fetcher.calls == []

    def test_signature_for_other_path(self, signed_client, signing_key):
        """测试签名与路径不匹配"""
        signature = sign_path(build_path(SOURCE_URL, ["resize:10:10"]), signing_key)
        response = signed_client.get(f"/{signature}/{build_path(SOURCE_URL, ['resize:10:11'])}")
        assert response.status_code == 403

    def test_invalid_params(self, signed_client, signing_key):
        """测试路径语法错误返回 422"""
        response = signed_client.get(signed_url("invalidfilter/cGF0aA", signing_key))

        assert response.status_code == 422
        assert response.text == "Invalid params"

    def test_unsupported_scheme(self, signed_client, signing_key):
        """测试不支持的源图协议返回 422"""
        response = signed_client.get(signed_url(build_path("ftp://example.com/a.png"), signing_key))

        assert response.status_code == 422
        assert response.text == "Unsupported protocol for remote image"

    def test_fetch_failure(self, signing_key):
        """测试源站获取失败返回 404"""
        fetcher = StaticFetcher(error=FetchError("connection refused to internal host"))
        app = create_app(orchestrator=create_orchestrator(fetcher, key=signing_key))

        with TestClient(app) as client:
            response = client.get(signed_url(build_path(SOURCE_URL), signing_key))

        assert response.status_code == 404
        assert response.text == "Fetching remote image failed"
        assert "internal host" not in response.text

    def test_unsupported_output_format(self, signed_client, signing_key):
        """测试不能编码的输出格式返回 422"""
        response = signed_client.get(signed_url(build_path(SOURCE_URL, ["format:dds"]), signing_key))

        assert response.status_code == 422
        assert response.text == "Unsupported output format"

    def test_unsigned_mode_accepts_any_signature(self, unsigned_client):
        """测试未配置密钥时接受任意签名"""
        response = unsigned_client.get(f"/_/{build_path(SOURCE_URL, ['format:jpg'])}")

        assert response.status_code == 200
        assert response.headers["content-type"] == "image/jpeg"

    def test_missing_source_url(self, unsigned_client):
        """测试缺少源图 URL"""
        response = unsigned_client.get("/_/")
        assert response.status_code == 422

    def test_fetcher_closed_on_shutdown(self, static_fetcher):
        """测试服务关闭时释放获取器"""
        app = create_app(orchestrator=create_orchestrator(static_fetcher))
        with TestClient(app):
            assert not static_fetcher.closed
        assert static_fetcher.closed

    def test_warns_when_signature_disabled(self, static_fetcher, caplog):
        """测试未配置密钥时启动输出警告"""
        app = create_app(orchestrator=create_orchestrator(static_fetcher))

        with caplog.at_level(logging.WARNING, logger="py_image_gateway"):
            with TestClient(app):
                pass

        warnings = [record for record in caplog.records if record.levelno == logging.WARNING]
        assert any(record.getMessage() == SIGNATURE_DISABLED_WARNING for record in warnings)

    def test_no_warning_when_key_set(self, static_fetcher, signing_key, caplog):
        """测试配置了密钥时不输出警告"""
        app = create_app(orchestrator=create_orchestrator(static_fetcher, key=signing_key))

        with caplog.at_level(logging.WARNING, logger="py_image_gateway"):
            with TestClient(app):
                pass

        assert SIGNATURE_DISABLED_WARNING not in caplog.messages
