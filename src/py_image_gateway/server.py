"""图像网关 HTTP 服务。

路由：
    GET /healthz                     存活检查
    GET /{signature}/{filters...}/{source}  鉴权、获取、变换并返回图像
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse, Response

from . import __version__
from .config import AppConfig, get_config
from .engine.orchestrator import RequestOrchestrator
from .exceptions import GatewayError
from .utils.logging_helpers import configure_logging, get_logger


logger = get_logger()

SIGNATURE_DISABLED_WARNING = (
    "签名校验已关闭，服务容易受到拒绝服务攻击。设置 KEY 环境变量以启用签名校验。"
)


def _signed_path_bytes(request: Request) -> bytes | None:
    """从原始请求路径中取出签名段之后的字节，保持客户端发送时的原样"""
    raw_path = request.scope.get("raw_path")
    if not raw_path:
        return None
    parts = raw_path.split(b"/", 2)
    if len(parts) < 3:
        return None
    return parts[2]


def create_app(
    orchestrator: RequestOrchestrator | None = None,
    app_config: AppConfig | None = None,
) -> FastAPI:
    """创建 FastAPI 应用

    Args:
        orchestrator: 请求编排器，默认按配置创建
        app_config: 应用配置，默认使用全局配置
    """
    app_config = app_config or get_config()
    orchestrator = orchestrator or RequestOrchestrator.from_config(app_config)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if orchestrator.key is None:
            logger.warning(SIGNATURE_DISABLED_WARNING)
        logger.info(
            f"py-image-gateway {__version__} 启动 "
            f"({app_config.server.HOST}:{app_config.server.PORT})"
        )
        yield
        await orchestrator.aclose()

    app = FastAPI(title="py-image-gateway", version=__version__, lifespan=lifespan)
    app.state.orchestrator = orchestrator

    @app.exception_handler(GatewayError)
    async def gateway_error_handler(request: Request, exc: GatewayError):
        # 只返回固定消息，内部细节已写入日志
        return PlainTextResponse(exc.public_message, status_code=exc.status_code)

    @app.get("/healthz")
    async def health() -> PlainTextResponse:
        return PlainTextResponse("OK")

    @app.get("/{signature}/{rest:path}")
    async def process(request: Request, signature: str, rest: str) -> Response:
        result = await orchestrator.handle(
            signature, rest, signed_path=_signed_path_bytes(request)
        )
        return Response(content=result.body, headers=result.headers)

    return app


def main() -> None:
    """启动 HTTP 服务"""
    import uvicorn

    app_config = get_config()
    configure_logging(app_config.logging.LOG_LEVEL, app_config.logging.LOG_FORMAT)
    uvicorn.run(
        create_app(app_config=app_config),
        host=app_config.server.HOST,
        port=app_config.server.PORT,
        log_level=app_config.logging.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
