"""
Tourism Analytics - REST API.

Flask REST API serving the analytics results as JSON. The dataset is loaded
lazily on the first request and cached for the life of the process.

Usage:
    python api.py                    # Run on default port 5000
    python api.py --port 8080        # Run on custom port
    python api.py --data-dir ./data  # Read CSVs from another directory

Endpoints:
    GET  /                                  - API documentation
    GET  /health                            - Health check
    GET  /api/overview                      - Dataset-wide KPIs
    GET  /api/spending-breakdown            - Average cost components
    GET  /api/clustering                    - K-means customer segments
    GET  /api/cohort                        - Monthly cohorts and seasons
    GET  /api/regression                    - Spending/satisfaction factors
    GET  /api/vendor/<category>             - Vendor view
    GET  /api/nationality                   - Nationality list
    GET  /api/nationality/<nationality>     - Nationality profile
    GET  /api/timeseries                    - Monthly arrivals
    GET  /api/diagnostics                   - Diagnostic insights
"""

import argparse
from datetime import datetime
from typing import Optional

from flask import Flask, Blueprint, jsonify, current_app
from werkzeug.exceptions import HTTPException

from tourism_analytics.analytics import (
    compute_overview,
    compute_spending_breakdown,
    compute_time_series,
    list_nationalities,
    nationality_detail,
    perform_cohort_analysis,
    perform_customer_segmentation,
    perform_regression_analysis,
    run_diagnostics,
    vendor_insights,
    VENDOR_VIEWS,
)
from tourism_analytics.config.config import DATA_DIR
from tourism_analytics.data.provider import DataProvider
from tourism_analytics.exceptions import (
    DataUnavailableError,
    InsufficientDataError,
    NationalityNotFoundError,
    UnknownVendorCategoryError,
)
from tourism_analytics.utils.logger import get_logger

logger = get_logger(__name__)

api = Blueprint('api', __name__, url_prefix='/api')


def _dataset():
    return current_app.config['DATA_PROVIDER'].get()


# Endpoints


@api.route('/overview', methods=['GET'])
def overview():
    return jsonify(compute_overview(_dataset()))


@api.route('/spending-breakdown', methods=['GET'])
def spending_breakdown():
    return jsonify(compute_spending_breakdown(_dataset().tourists))


@api.route('/clustering', methods=['GET'])
def clustering():
    return jsonify(perform_customer_segmentation(_dataset().tourists))


@api.route('/cohort', methods=['GET'])
def cohort():
    return jsonify(perform_cohort_analysis(_dataset().tourists))


@api.route('/regression', methods=['GET'])
def regression():
    return jsonify(perform_regression_analysis(_dataset().tourists))


@api.route('/vendor/<category>', methods=['GET'])
def vendor(category: str):
    return jsonify(vendor_insights(_dataset(), category))


@api.route('/nationality', methods=['GET'])
def nationalities():
    return jsonify(list_nationalities(_dataset().tourists))


@api.route('/nationality/<nationality>', methods=['GET'])
def nationality(nationality: str):
    return jsonify(nationality_detail(_dataset(), nationality))


@api.route('/timeseries', methods=['GET'])
def timeseries():
    return jsonify(compute_time_series(_dataset().tourists))


@api.route('/diagnostics', methods=['GET'])
def diagnostics():
    return jsonify(run_diagnostics(_dataset()))


# Error mapping


def _error(message: str, status: int):
    return jsonify({'error': message}), status


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(NationalityNotFoundError)
    @app.errorhandler(UnknownVendorCategoryError)
    def not_found(e):
        return _error(str(e), 404)

    @app.errorhandler(DataUnavailableError)
    def data_unavailable(e):
        logger.error(f"Data unavailable: {e}")
        return _error(str(e), 503)

    @app.errorhandler(InsufficientDataError)
    def insufficient_data(e):
        logger.warning(f"Insufficient data: {e}")
        return _error(str(e), 422)

    @app.errorhandler(HTTPException)
    def http_error(e):
        return _error(e.description, e.code)

    @app.errorhandler(Exception)
    def unexpected(e):
        logger.exception("Unhandled error while serving request")
        return _error('Something went wrong!', 500)


def create_app(provider: Optional[DataProvider] = None) -> Flask:
    """Build the Flask app; tests pass a provider over an in-memory dataset."""
    app = Flask(__name__)
    app.config['DATA_PROVIDER'] = provider or DataProvider()
    app.register_blueprint(api)
    _register_error_handlers(app)

    @app.route('/', methods=['GET'])
    def index():
        """Root endpoint with API documentation."""
        return jsonify({
            'name': 'Kathmandu Valley Tourism Analytics API',
            'version': '1.0',
            'endpoints': {
                'GET /': 'This documentation',
                'GET /health': 'Health check',
                'GET /api/overview': 'Dataset-wide KPIs',
                'GET /api/spending-breakdown': 'Average cost components',
                'GET /api/clustering': 'K-means customer segments',
                'GET /api/cohort': 'Monthly cohorts and seasonal patterns',
                'GET /api/regression': 'Spending and satisfaction factors',
                'GET /api/vendor/<category>': f"Vendor view ({', '.join(VENDOR_VIEWS)})",
                'GET /api/nationality': 'Nationality list',
                'GET /api/nationality/<nationality>': 'Nationality profile',
                'GET /api/timeseries': 'Monthly arrivals',
                'GET /api/diagnostics': 'Diagnostic insights',
            },
        })

    @app.route('/health', methods=['GET'])
    def health():
        """Health check endpoint."""
        return jsonify({
            'status': 'ok',
            'data_loaded': app.config['DATA_PROVIDER'].is_loaded,
            'timestamp': datetime.now().isoformat(),
        })

    return app


# ──────────────────────────────────────────────
# Main
# ──────────────────────────────────────────────

if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Tourism Analytics REST API")
    parser.add_argument("--port", type=int, default=5000, help="Port to run the API on")
    parser.add_argument("--host", type=str, default="127.0.0.1", help="Host to bind to")
    parser.add_argument("--data-dir", type=str, default=str(DATA_DIR), help="Directory holding the CSV files")
    parser.add_argument("--debug", action="store_true", help="Enable debug mode")
    args = parser.parse_args()

    app = create_app(DataProvider(data_dir=args.data_dir))
    print(f"Starting API server on http://{args.host}:{args.port}")
    print(f"  Data directory: {args.data_dir}")
    print(f"  GET  /api/overview, /api/clustering, /api/cohort, /api/regression, ...")

    app.run(host=args.host, port=args.port, debug=args.debug)
