"""
Quiz Catalog - quiz modules, combined quizzes and result history.
A Flask app that serves quiz files from a folder structure and records attempts.
"""

import logging
import os
import sys
import threading
import webbrowser
from pathlib import Path

from flask import Flask, render_template, jsonify, request
from waitress import serve

from quiz import (
    QuizCatalog, QuizLoadError, QuizNotFoundError, ValidationError,
    parse_count, validate_filename,
)
from results import ResultLog, ResultLogError

# Determine base path (works for both dev and PyInstaller exe)
if getattr(sys, 'frozen', False):
    BASE_DIR = Path(sys.executable).parent
else:
    BASE_DIR = Path(__file__).parent

QUIZ_DIR = Path(os.environ.get('QUIZ_DIR', BASE_DIR / "quizzes"))
RESULTS_FILE = Path(os.environ.get('RESULTS_FILE', BASE_DIR / "results.json"))
HOST = os.environ.get('HOST', '127.0.0.1')
PORT = int(os.environ.get('PORT', 5000))
LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

logger = logging.getLogger(__name__)

app = Flask(__name__,
            template_folder=str(BASE_DIR / "templates"),
            static_folder=str(BASE_DIR / "static"))
app.config.update(QUIZ_DIR=QUIZ_DIR, RESULTS_FILE=RESULTS_FILE)

# Keep option labels in the order they were authored
app.json.sort_keys = False


def get_catalog():
    return QuizCatalog(app.config['QUIZ_DIR'], logger=logger)


def get_result_log():
    return ResultLog(app.config['RESULTS_FILE'], logger=logger)


def no_cache(response):
    """Mark a response as never cacheable (random content)."""
    response.headers["Cache-Control"] = "no-cache, no-store, must-revalidate"
    response.headers["Pragma"] = "no-cache"
    response.headers["Expires"] = "0"
    return response


# ========================================
# Error Handlers
# ========================================

@app.errorhandler(ValidationError)
def handle_validation_error(e):
    return jsonify({"success": False, "error": str(e)}), 400


@app.errorhandler(QuizNotFoundError)
def handle_quiz_not_found(e):
    return jsonify({"success": False, "error": str(e)}), 404


@app.errorhandler(QuizLoadError)
def handle_quiz_load_error(e):
    logger.error("%s", e)
    return jsonify({"success": False, "error": str(e)}), 500


@app.errorhandler(ResultLogError)
def handle_result_log_error(e):
    return jsonify({"success": False, "error": str(e)}), 500


@app.route('/')
def index():
    """Render the quiz application page."""
    return render_template('index.html')


# ========================================
# Quiz Catalog API Routes
# ========================================

@app.route('/quiz/modules')
def quiz_modules():
    """List the available quiz modules."""
    return jsonify(get_catalog().list_modules())


@app.route('/quiz/list/')
@app.route('/quiz/list/<module>')
def quiz_list(module=None):
    """List quiz files in a module, or in the quiz root when no module is given."""
    return jsonify(get_catalog().list_quiz_files(module))


@app.route('/quiz/load/<filename>')
def quiz_load(filename):
    """Load a single quiz file, optionally scoped to a module."""
    validate_filename(filename)
    module = request.args.get('module') or None
    return jsonify(get_catalog().load_quiz_file(filename, module))


@app.route('/quiz/combined')
def quiz_combined():
    """Build a shuffled quiz sampled across one or all modules."""
    count = parse_count(request.args.get('count'))
    module = request.args.get('module') or None

    questions = get_catalog().get_combined_quiz(count, module)
    logger.info("Combined quiz: %d question(s) (requested %d, module=%s)",
                len(questions), count, module or 'all')
    return no_cache(jsonify(questions))


# ========================================
# Result History API Routes
# ========================================

@app.route('/results', methods=['POST'])
def results_submit():
    """Record a finished quiz attempt."""
    data = request.get_json(silent=True)
    entry = get_result_log().append(data)
    return jsonify({"status": "saved", "data": entry})


@app.route('/results', methods=['GET'])
def results_history():
    """Get every recorded quiz attempt."""
    return jsonify(get_result_log().load())


def open_browser():
    """Open the browser after a short delay."""
    webbrowser.open(f'http://{HOST}:{PORT}')


if __name__ == '__main__':
    logging.basicConfig(
        level=LOG_LEVEL.upper(),
        format='%(asctime)s %(levelname)s [%(name)s] %(message)s'
    )

    QUIZ_DIR.mkdir(parents=True, exist_ok=True)

    logger.info("Quiz Catalog starting (pid %s)", os.getpid())
    logger.info("Quiz folder: %s", QUIZ_DIR)
    logger.info("Results file: %s", RESULTS_FILE)

    if os.environ.get('OPEN_BROWSER', '1') != '0':
        threading.Timer(1.5, open_browser).start()

    logger.info("Starting server at http://%s:%s", HOST, PORT)
    logger.info("Press Ctrl+C to stop")
    serve(app, host=HOST, port=PORT, threads=4)
