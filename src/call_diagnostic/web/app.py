"""
Diagnostic API - RESTful endpoints behind the diagnostic wizard
"""

import logging
from datetime import datetime

from flask import Flask, request, jsonify
from flask_cors import CORS

from ..analysis.classifier import BusinessHours
from ..analysis.engine import DiagnosticAnalyzer
from ..config.settings import Settings
from ..database import SessionManager, ConnectionStore, DiagnosticStore
from ..providers import build_provider, resolve_provider_name, DiagnosticError

logger = logging.getLogger(__name__)

OPTIONAL_TEXT_FIELDS = ('companyName', 'industry', 'businessEmail')
BOOKING_REQUIRED_FIELDS = ('name', 'email', 'phone')


def _error(message: str, status: int = 400, **extra):
    body = {'error': message}
    body.update(extra)
    return jsonify(body), status


def _invalid_text_field(data: dict, fields) -> str:
    """Name of the first field present with a non-string value, if any"""
    for field in fields:
        value = data.get(field)
        if value is not None and not isinstance(value, str):
            return field
    return ''


def create_app(settings=None, session_manager=None, http_session=None) -> Flask:
    """
    Create the Flask application

    Args:
        settings: Settings instance (read from the environment if omitted)
        session_manager: SessionManager (built from settings.database_url if omitted)
        http_session: Optional requests session for provider calls
    """
    settings = settings or Settings()
    session_manager = session_manager or SessionManager(settings.database_url)
    session_manager.init_db()

    connection_store = ConnectionStore(session_manager)
    diagnostic_store = DiagnosticStore(session_manager)
    business_hours = BusinessHours(
        settings.business_timezone,
        settings.business_hours_start,
        settings.business_hours_end
    )

    app = Flask(__name__)
    CORS(app)

    @app.route('/health', methods=['GET'])
    def health_check():
        """Health check endpoint"""
        return jsonify({
            'status': 'healthy' if session_manager.health_check() else 'degraded',
            'timestamp': datetime.now().isoformat(),
            'service': 'diagnostic_api'
        })

    @app.route('/api/diagnostic/analyze', methods=['POST'])
    def analyze():
        """
        Analyze the connected provider's last 30 days of calls

        Body:
        - provider: "RingCentral" or "Zoom Phone" (slugs also accepted)
        - avgRevenuePerCall: optional positive number
        - companyName, industry, businessEmail: optional
        """
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            return _error("Request body must be a JSON object")

        provider_name = resolve_provider_name(data.get('provider') or '')
        if not provider_name:
            return _error(f"Unsupported provider: {data.get('provider')}")

        invalid = _invalid_text_field(data, OPTIONAL_TEXT_FIELDS)
        if invalid:
            return _error(f"{invalid} must be a string")

        try:
            provider = build_provider(
                provider_name, settings, connection_store, session=http_session
            )
            analyzer = DiagnosticAnalyzer(
                provider,
                connection_store,
                business_hours=business_hours,
                window_days=settings.analysis_window_days
            )
            result = analyzer.analyze(
                avg_revenue_per_call=data.get('avgRevenuePerCall'),
                company_name=data.get('companyName'),
                industry=data.get('industry')
            )
        except (DiagnosticError, ValueError) as e:
            logger.error(f"Error analyzing {provider_name} diagnostic: {e}")
            return _error(str(e))

        if result is None:
            return _error(f"No {provider_name} connection found", connected=False)

        diagnostic_id = diagnostic_store.save(result, business_email=data.get('businessEmail'))

        body = result.to_dict()
        body['id'] = diagnostic_id
        return jsonify(body)

    @app.route('/api/diagnostics', methods=['GET'])
    def list_diagnostics():
        """All diagnostics, newest first"""
        return jsonify(diagnostic_store.list_all())

    @app.route('/api/diagnostics/<diagnostic_id>', methods=['GET'])
    def get_diagnostic(diagnostic_id):
        diagnostic = diagnostic_store.get(diagnostic_id)
        if not diagnostic:
            return _error("Diagnostic not found", 404)
        return jsonify(diagnostic)

    @app.route('/api/diagnostics/email/<email>', methods=['GET'])
    def diagnostics_by_email(email):
        return jsonify(diagnostic_store.list_by_email(email))

    @app.route('/api/bookings', methods=['POST'])
    def submit_booking():
        """
        Record a consultation booking request

        Body:
        - name, email, phone: required strings
        - company: optional string
        - diagnosticData: the diagnostic the request refers to, with totalLoss
        """
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            return _error("Request body must be a JSON object")

        missing = [f for f in BOOKING_REQUIRED_FIELDS if not data.get(f)]
        if missing:
            return _error(f"Missing required fields: {', '.join(missing)}")

        invalid = _invalid_text_field(data, BOOKING_REQUIRED_FIELDS + ('company',))
        if invalid:
            return _error(f"{invalid} must be a string")

        diagnostic = data.get('diagnosticData')
        total_loss = diagnostic.get('totalLoss') if isinstance(diagnostic, dict) else None
        if isinstance(total_loss, bool) or not isinstance(total_loss, (int, float)):
            return _error("diagnosticData.totalLoss must be a number")

        logger.info(
            f"Booking request received: name={data['name']}, email={data['email']}, "
            f"phone={data['phone']}, company={data.get('company')}, totalLoss={total_loss}"
        )

        return jsonify({'success': True, 'message': 'Booking request received'})

    @app.route('/auth/<provider>/status', methods=['GET'])
    def connection_status(provider):
        """Whether the provider is connected and its token still valid"""
        provider_name = resolve_provider_name(provider)
        if not provider_name:
            return _error(f"Unsupported provider: {provider}", 404)
        return jsonify(connection_store.status(provider_name))

    @app.route('/auth/<provider>/disconnect', methods=['POST'])
    def disconnect(provider):
        provider_name = resolve_provider_name(provider)
        if not provider_name:
            return _error(f"Unsupported provider: {provider}", 404)
        connection_store.delete(provider_name)
        return jsonify({'success': True})

    return app


def main():
    settings = Settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    app = create_app(settings)
    app.run(host='0.0.0.0', port=5000)


if __name__ == '__main__':
    main()
