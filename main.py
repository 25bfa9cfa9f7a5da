"""
Main entrypoint: FastAPI server over one registry connection.

The API lifespan connects to the node, activates REGISTRY_ACCOUNT_INDEX among
its unlocked accounts and reconciles that account in the background.

Env: REGISTRY_RPC_URL, REGISTRY_CONTRACT_ADDRESS, REGISTRY_ACCOUNT_INDEX, API_HOST, API_PORT, LOG_LEVEL, etc.

Equivalent: uvicorn registry_client.api_server.app:app --host 0.0.0.0 --port 8000
"""

# Configure structured JSON logging before other imports that may log
from registry_client.registry_logging import configure_logging, get_logger

logger = get_logger("main")


def main() -> None:
    """Run the API server in the main thread."""
    from registry_client.config import get_settings
    from registry_client.config.env import mask_rpc_url

    try:
        settings = get_settings()
    except ValueError as e:
        logger.error("main_config_error", error=str(e))
        raise SystemExit(1) from e

    configure_logging(settings.log_level)

    from registry_client.api_server.app import app
    import uvicorn

    logger.info(
        "main_server_starting",
        host=settings.api_host,
        port=settings.api_port,
        rpc_url=mask_rpc_url(settings.rpc_url),
        contract=settings.contract_address,
    )
    uvicorn.run(app, host=settings.api_host, port=settings.api_port, log_level=settings.log_level)


if __name__ == "__main__":
    main()
