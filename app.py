"""
Typopp Backend - Main Flask Application
=======================================
Document proofing API: analyzes Google Docs, pasted text and uploaded
files for spelling, grammar and style issues in English, Turkish, German
and French.

Endpoints:
- GET  /api/health                          - Liveness check
- GET  /api/folders                         - Google Drive folders
- GET  /api/folder/<folder_id>/documents    - Google Docs in a folder
- GET  /api/document/<document_id>          - Google Doc text
- POST /api/analyze                         - Analyze a batch of documents
- POST /api/analyze-demo                    - Analyze one pasted document
- POST /api/upload                          - Analyze uploaded .txt/.docx/.pdf files
- POST /api/report                          - Markdown report for one document
"""
from typing import Any, Callable, Dict, Optional

from flask import Blueprint, Flask, Response, current_app, g, jsonify, request
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from config_logging import (
    APP_NAME, SECURITY_HEADERS, VERSION, AppConfig, AuthenticationError, RateLimiter,
    RateLimitError, StructuredLogger, TypoppError, ValidationError, get_config, get_logger,
    sanitize_filename, validate_file_extension,
)
from drive_client import DriveClient
from file_parsers import extract_text
from proofing import AnalysisRequest, DocumentAnalyzer, create_analyzer, format_analysis_result

logger = get_logger('app')

DriveClientFactory = Callable[[str, float], Any]

api = Blueprint('api', __name__, url_prefix='/api')


def _default_drive_client_factory(access_token: str, timeout: float) -> DriveClient:
    return DriveClient(access_token, timeout=timeout)


# =============================================================================
# REQUEST HELPERS
# =============================================================================

def get_analyzer() -> DocumentAnalyzer:
    return current_app.extensions['typopp_analyzer']


def get_app_config() -> AppConfig:
    return current_app.extensions['typopp_config']


def get_drive_client():
    """Drive client for the caller's token, header first, then server config."""
    token = ''
    auth_header = request.headers.get('Authorization', '')
    if auth_header.lower().startswith('bearer '):
        token = auth_header[7:].strip()
    if not token:
        token = get_app_config().google_access_token
    if not token:
        raise AuthenticationError("Google access token required")

    factory = current_app.extensions['typopp_drive_client_factory']
    return factory(token, get_app_config().http_timeout)


def get_json_body() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object", field='body')
    return data


def _required_document(data: Dict[str, Any]) -> AnalysisRequest:
    analysis_request = AnalysisRequest.from_dict(data)
    if not analysis_request.title or not analysis_request.content:
        raise ValidationError("Content and title are required", field='content')
    return analysis_request


# =============================================================================
# ROUTES
# =============================================================================

@api.route('/health', methods=['GET'])
def health():
    """Liveness check"""
    return jsonify({'status': 'OK', 'message': f'{APP_NAME} server is running', 'version': VERSION})


@api.route('/folders', methods=['GET'])
def list_folders():
    """List the caller's Google Drive folders"""
    return jsonify(get_drive_client().list_folders())


@api.route('/folder/<folder_id>/documents', methods=['GET'])
def list_folder_documents(folder_id):
    """List Google Docs in a folder"""
    return jsonify(get_drive_client().list_documents(folder_id))


@api.route('/document/<document_id>', methods=['GET'])
def get_document(document_id):
    """Fetch the text of a Google Doc"""
    return jsonify(get_drive_client().get_document(document_id))


@api.route('/analyze', methods=['POST'])
def analyze_documents():
    """Analyze a batch of {title, content} documents"""
    documents = get_json_body().get('documents')
    if not isinstance(documents, list):
        raise ValidationError("Documents array is required", field='documents')
    if not all(isinstance(doc, dict) for doc in documents):
        raise ValidationError("Each document must be an object with title and content",
                              field='documents')

    analysis_requests = [AnalysisRequest.from_dict(doc) for doc in documents]
    with logger.log_operation('analyze', documents=len(analysis_requests)):
        results = get_analyzer().analyze_many(analysis_requests)
    return jsonify({'results': [result.to_dict() for result in results]})


@api.route('/analyze-demo', methods=['POST'])
def analyze_demo():
    """Analyze one pasted document"""
    analysis_request = _required_document(get_json_body())
    result = get_analyzer().analyze(analysis_request)
    return jsonify({'results': [result.to_dict()]})


@api.route('/upload', methods=['POST'])
def upload_files():
    """Analyze uploaded documents, each titled by its filename"""
    files = request.files.getlist('files') or request.files.getlist('file')
    if not files:
        raise ValidationError("No file part in request", field='files')

    allowed = get_app_config().allowed_extensions
    analysis_requests = []
    for file in files:
        if not file.filename:
            raise ValidationError("No file selected", field='files')
        filename = sanitize_filename(file.filename)
        if not validate_file_extension(filename, allowed):
            raise ValidationError(f'File type not allowed. Supported: {", ".join(allowed)}',
                                  field='files', filename=filename)
        analysis_requests.append(AnalysisRequest(title=filename, content=extract_text(file.stream, filename)))

    with logger.log_operation('upload', files=len(analysis_requests)):
        results = get_analyzer().analyze_many(analysis_requests)
    return jsonify({'results': [result.to_dict() for result in results]})


@api.route('/report', methods=['POST'])
def report():
    """Markdown report for one document"""
    analysis_request = _required_document(get_json_body())
    result = get_analyzer().analyze(analysis_request)
    return Response(format_analysis_result(result), mimetype='text/markdown')


# =============================================================================
# APPLICATION FACTORY
# =============================================================================

def _error_response(payload: Dict[str, Any], status_code: int):
    payload['error']['correlation_id'] = getattr(g, 'correlation_id', 'unknown')
    return jsonify(payload), status_code


def register_request_hooks(app: Flask, config: AppConfig):
    """Correlation ids, rate limiting, security headers and JSON errors."""
    limiter = RateLimiter(config.rate_limit_requests, config.rate_limit_window)
    app.extensions['typopp_rate_limiter'] = limiter

    @app.before_request
    def assign_correlation_id():
        correlation_id = request.headers.get('X-Correlation-ID')
        if correlation_id:
            StructuredLogger.set_correlation_id(correlation_id)
        else:
            correlation_id = StructuredLogger.new_correlation_id()
        g.correlation_id = correlation_id

    @app.before_request
    def enforce_rate_limit():
        if not config.rate_limit_enabled or request.method == 'OPTIONS':
            return None
        client = request.remote_addr or 'unknown'
        if not limiter.is_allowed(client):
            logger.warning("Rate limit exceeded", client=client, path=request.path)
            raise RateLimitError(retry_after=limiter.get_retry_after(client))
        return None

    @app.after_request
    def add_response_headers(response):
        for header, value in SECURITY_HEADERS.items():
            response.headers.setdefault(header, value)
        correlation_id = getattr(g, 'correlation_id', None)
        if correlation_id:
            response.headers['X-Correlation-ID'] = correlation_id
        return response

    @app.errorhandler(TypoppError)
    def handle_typopp_error(e: TypoppError):
        if e.status_code >= 500:
            logger.error(f"{e.code}: {e.message}", path=request.path, details=e.details)
        else:
            logger.warning(f"{e.code}: {e.message}", path=request.path)
        response, status = _error_response(e.to_dict(), e.status_code)
        if isinstance(e, RateLimitError):
            response.headers['Retry-After'] = str(e.details.get('retry_after', 60))
        return response, status

    @app.errorhandler(HTTPException)
    def handle_http_error(e: HTTPException):
        return _error_response({
            'success': False,
            'error': {
                'code': (e.name or 'HTTP_ERROR').upper().replace(' ', '_'),
                'message': e.description,
            }
        }, e.code or 500)


def create_app(config: Optional[AppConfig] = None,
               analyzer: Optional[DocumentAnalyzer] = None,
               drive_client_factory: Optional[DriveClientFactory] = None) -> Flask:
    """
    Build the Flask application.

    One analyzer instance serves every request; pass one in to use custom
    pattern tables, otherwise it is built from the environment.
    """
    config = config or get_config()

    app = Flask(__name__)
    app.config['MAX_CONTENT_LENGTH'] = config.max_content_length
    app.json.ensure_ascii = False

    app.extensions['typopp_config'] = config
    app.extensions['typopp_analyzer'] = analyzer or create_analyzer()
    app.extensions['typopp_drive_client_factory'] = drive_client_factory or _default_drive_client_factory

    origins = [o.strip() for o in config.cors_origins.split(',')] if config.cors_origins != '*' else '*'
    CORS(app, resources={r"/api/*": {"origins": origins}}, send_wildcard=origins == '*')

    register_request_hooks(app, config)
    app.register_blueprint(api)

    logger.info("Application created", version=VERSION, rate_limit=config.rate_limit_enabled)
    return app


def main():
    config = get_config()
    is_valid, errors = config.validate()
    if not is_valid:
        for error in errors:
            logger.critical(f"Invalid configuration: {error}")
        return 1

    app = create_app(config)
    print("=" * 60)
    print(f"  {APP_NAME} v{VERSION}")
    print(f"  Starting server at http://{config.host}:{config.port}")
    print("=" * 60)
    app.run(host=config.host, port=config.port, debug=config.debug)
    return 0


if __name__ == '__main__':
    raise SystemExit(main())
