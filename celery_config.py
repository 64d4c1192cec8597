# celery_config.py
from celery import Celery
import os
from dotenv import load_dotenv
from config.settings import DEFAULT_REDIS_URL, get_refresh_interval

load_dotenv()

# Initialize Celery app
celery_app = Celery(
    'token_tasks',
    broker=os.getenv('REDIS_URL', DEFAULT_REDIS_URL),
    include=['tasks']  # Explicitly include the tasks module
)

# Configuration
celery_app.conf.update(
    task_serializer='json',
    accept_content=['json'],
    result_serializer='json',
    timezone='UTC',
    worker_concurrency=1,
)

# Beat schedule: keep the access token younger than Spotify's one hour expiry
celery_app.conf.beat_schedule = {
    'refresh-access-token': {
        'task': 'tasks.refresh_access_token',
        'schedule': get_refresh_interval(),
    },
}

# This ensures the tasks are registered
if __name__ == '__main__':
    celery_app.start()
