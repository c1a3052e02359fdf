import os
import sys
import logging

logging_str = "[%(asctime)s] {%(pathname)s:%(lineno)d} %(levelname)s - %(message)s"
logging_dir = os.getenv(
    "LOG_DIR",
    os.path.join(os.path.dirname("/".join(os.path.abspath(__file__).split('/')[:-2])), "logs"),
)
logging_path = os.path.join(logging_dir, "ytnote.log")
os.makedirs(logging_dir, exist_ok=True)

logging.basicConfig(
    level=logging.INFO,
    format=logging_str,
    handlers=[
        logging.FileHandler(logging_path),
        logging.StreamHandler(sys.stdout)
    ]
)

logging = logging.getLogger('ytnote')
