import os
from dotenv import load_dotenv

from ..utils.formatting import as_number

# Load environment variables
load_dotenv()


class Settings:
    def __init__(self):
        # Database
        self.database_url = os.getenv('DATABASE_URL', 'sqlite:///diagnostic.db')

        # RingCentral
        self.ringcentral_client_id = os.getenv('RINGCENTRAL_CLIENT_ID')
        self.ringcentral_client_secret = os.getenv('RINGCENTRAL_CLIENT_SECRET')
        self.ringcentral_server_url = os.getenv('RINGCENTRAL_SERVER_URL', 'https://platform.ringcentral.com')
        self.ringcentral_default_revenue = as_number(float(os.getenv('RINGCENTRAL_DEFAULT_REVENUE', '350')))

        # Zoom Phone
        self.zoom_client_id = os.getenv('ZOOM_CLIENT_ID')
        self.zoom_client_secret = os.getenv('ZOOM_CLIENT_SECRET')
        self.zoom_api_url = os.getenv('ZOOM_API_URL', 'https://api.zoom.us/v2')
        self.zoom_token_url = os.getenv('ZOOM_TOKEN_URL', 'https://zoom.us/oauth/token')
        self.zoom_default_revenue = as_number(float(os.getenv('ZOOM_DEFAULT_REVENUE', '1000')))

        # Analysis
        self.business_timezone = os.getenv('BUSINESS_TIMEZONE', 'America/New_York')
        self.business_hours_start = int(os.getenv('BUSINESS_HOURS_START', '8'))
        self.business_hours_end = int(os.getenv('BUSINESS_HOURS_END', '18'))
        self.analysis_window_days = int(os.getenv('ANALYSIS_WINDOW_DAYS', '30'))

        # HTTP
        self.http_timeout = int(os.getenv('HTTP_TIMEOUT', '30'))

        # Logging
        self.log_level = os.getenv('LOG_LEVEL', 'INFO').upper()
