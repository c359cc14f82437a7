import logging

import uvicorn

import config
from utils.config_validator import validate_or_exit
from utils.logging_config import setup_logging

# Initialize centralized logging configuration
setup_logging()

# Validate critical configuration before anything connects
validate_or_exit(config)

from app import create_app

# Silence SQL echo noise, keep warnings
for logger_name in ['aiosqlite', 'sqlalchemy.engine', 'sqlalchemy.pool']:
    logging.getLogger(logger_name).setLevel(logging.WARNING)

app = create_app()

if __name__ == '__main__':
    logging.info(f"Starting API on {config.WEB_HOST}:{config.WEB_PORT} ({config.RUNTIME_ENVIRONMENT.value})")
    uvicorn.run(app, host=config.WEB_HOST, port=config.WEB_PORT)
