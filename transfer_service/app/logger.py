from pythonjsonlogger import jsonlogger
import logging
import datetime
import sys


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    def add_fields(self, log_record, record, message_dict):
        super(CustomJsonFormatter, self).add_fields(log_record, record, message_dict)
        log_record['timestamp'] = datetime.datetime.now(datetime.timezone.utc).isoformat()
        log_record['level'] = record.levelname
        log_record['logger'] = record.name


def get_logger(name: str = "transfer_service") -> logging.Logger:
    logger = logging.getLogger(name)
    logger.setLevel(logging.INFO)
    if not logger.handlers:
        stream_handler = logging.StreamHandler(sys.stdout)
        stream_handler.setFormatter(CustomJsonFormatter('%(timestamp)s %(level)s %(logger)s %(message)s'))
        logger.addHandler(stream_handler)
    return logger


logger = get_logger()
