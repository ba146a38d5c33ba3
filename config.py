import os

class Config:
    SECRET_KEY = os.getenv('SECRET_KEY', 'dev_secret_key')
    SQLALCHEMY_DATABASE_URI = os.getenv('DATABASE_URI', 'sqlite:///printers.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    MAX_CONTENT_LENGTH = int(os.getenv('MAX_CONTENT_LENGTH', 5 * 1024 * 1024))
    DEFAULT_PRINTER_COLOR = os.getenv('DEFAULT_PRINTER_COLOR', '#3b82f6')
    IMPORT_ERROR_PREVIEW = int(os.getenv('IMPORT_ERROR_PREVIEW', 10))
    RECENT_CHANGES_LIMIT = int(os.getenv('RECENT_CHANGES_LIMIT', 5))
