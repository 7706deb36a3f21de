import logging

import redis
from flask import Flask, jsonify

from hitcounter.config import Settings
from hitcounter.counter import ResilientCounter
from hitcounter.errors import FatalError, RetriesExhausted

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def configure_logging(level='INFO'):
    level = level.upper()
    logging.basicConfig(level=level, format=LOG_FORMAT)
    # basicConfig is a no-op once the root logger has handlers
    logging.getLogger().setLevel(level)


def create_app(settings=None, cache=None):
    settings = settings or Settings()
    if cache is None:
        cache = redis.Redis(host=settings.redis_host, port=settings.redis_port,
                            db=settings.redis_db, password=settings.redis_password)

    app = Flask(__name__)
    app.config['SETTINGS'] = settings
    app.extensions['cache'] = cache
    app.extensions['counter'] = ResilientCounter(
        cache, max_retries=settings.max_retries, backoff=settings.backoff_seconds)

    @app.route('/')
    def hello():
        count = app.extensions['counter'].increment(settings.counter_key)
        return 'Hello World! I have been seen {} times.\n'.format(count), 200, {
            'Content-Type': 'text/plain; charset=utf-8'}

    @app.route('/health')
    def health():
        try:
            cache.ping()
        except redis.exceptions.RedisError as exc:
            logger.warning('Health check failed: %s', exc)
            return jsonify(status='unhealthy', error=str(exc)), 503
        return jsonify(status='healthy'), 200

    @app.errorhandler(RetriesExhausted)
    def cache_unavailable(exc):
        return jsonify(error=str(exc), retries=exc.retries), 503

    @app.errorhandler(FatalError)
    def cache_failed(exc):
        return jsonify(error=str(exc)), 500

    logger.info('Counting %r on redis://%s:%d/%d', settings.counter_key,
                settings.redis_host, settings.redis_port, settings.redis_db)
    return app


def main():
    settings = Settings()
    configure_logging(settings.log_level)
    app = create_app(settings)
    app.run(host=settings.host, port=settings.port, debug=settings.debug)


if __name__ == '__main__':
    main()
