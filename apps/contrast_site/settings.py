import os

APP_FOLDER = os.path.dirname(__file__)
UPLOADS_FOLDER = os.environ.get('CONTRAST_SITE_UPLOADS', os.path.join(APP_FOLDER, 'uploads'))
T_FOLDER = os.path.join(APP_FOLDER, 'translations')
DB_FOLDER = os.path.join(APP_FOLDER, 'databases')

SESSION_SECRET = os.environ.get('CONTRAST_SITE_SESSION_SECRET', 'my_secret_key')
LOG_LEVEL = os.environ.get('CONTRAST_SITE_LOG_LEVEL', 'INFO')

# Analysis
ANALYSIS_BLOCK_SIZE = int(os.environ.get('CONTRAST_SITE_BLOCK_SIZE', 16))
CLUSTER_COUNT = int(os.environ.get('CONTRAST_SITE_CLUSTER_COUNT', 2))
ANALYSIS_WORKERS = int(os.environ.get('CONTRAST_SITE_WORKERS', 1))
DEFAULT_THRESHOLD = float(os.environ.get('CONTRAST_SITE_DEFAULT_THRESHOLD', 1.0))

HISTORY_LIMIT = 20
ALLOWED_EXTENSIONS = ['.jpg', '.jpeg', '.png', '.webp']

for folder in (UPLOADS_FOLDER, T_FOLDER, DB_FOLDER):
    if not os.path.exists(folder):
        os.makedirs(folder)
