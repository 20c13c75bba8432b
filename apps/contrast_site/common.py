import logging
from py4web import Session, Translator, DAL
from py4web.utils.url_signer import URLSigner
from py4web.utils.dbstore import DBStore
from .settings import DB_FOLDER, T_FOLDER, SESSION_SECRET, LOG_LEVEL

logging.basicConfig(level=LOG_LEVEL, format='%(asctime)s %(levelname)s %(name)s: %(message)s')

# Database (session storage only)
db = DAL('sqlite://storage.db', folder=DB_FOLDER)

# Session
session = Session(secret=SESSION_SECRET, storage=DBStore(db))


# Translations
T = Translator(T_FOLDER)

# URL Signer
url_signer = URLSigner(session)
