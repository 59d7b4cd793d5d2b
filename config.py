"""
Configuration de l'API, lue depuis l'environnement (et un fichier .env s'il existe)
"""
import os
from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Paramètres de l'application"""

    def __init__(self):
        self.database_url = os.getenv('DATABASE_URL', 'sqlite:///./finance.db')
        self.log_level = os.getenv('LOG_LEVEL', 'INFO').upper()
        self.cors_origins = [
            origin.strip()
            for origin in os.getenv('CORS_ORIGINS', 'http://localhost:5173').split(',')
            if origin.strip()
        ]
        self.api_host = os.getenv('API_HOST', '0.0.0.0')
        self.api_port = int(os.getenv('API_PORT', '8000'))


settings = Settings()
