"""
N-gram Language Model Web Dashboard

A Flask application for building small models from posted sentences and
inspecting their tables.
"""

import io
import threading
from typing import Optional

from flask import Flask, Response, jsonify, request

from .config import WebBuildConfig
from .model import LanguageModel, format_number
from .smoothing import MissingContextError


app = Flask(__name__)

# Global state
model: Optional[LanguageModel] = None
model_lock = threading.Lock()


def _no_model():
    return jsonify({'error': 'No model built'}), 400


@app.route('/api/status')
def api_status():
    """Whether a model is loaded."""
    with model_lock:
        return jsonify({
            'has_model': model is not None,
            'max_order': model.max_order if model is not None else None,
        })


@app.route('/api/build', methods=['POST'])
def api_build():
    """Count posted sentences and build a model from them."""
    global model

    data = request.get_json(silent=True) or {}
    try:
        config = WebBuildConfig.from_json(data)
    except (TypeError, ValueError) as e:
        return jsonify({'error': str(e)}), 400

    if not config.sentences:
        return jsonify({'error': 'No sentences provided'}), 400

    try:
        new_model = LanguageModel.from_corpus(
            config.sentences, config.max_order,
            delta=config.delta,
            vocabulary=config.vocabulary,
            lowercase=config.lowercase,
            method=config.smoothing,
        )
    except ValueError as e:
        return jsonify({'error': str(e)}), 400

    with model_lock:
        model = new_model
        stats = model.stats()

    return jsonify({'message': 'Model built', 'stats': stats})


@app.route('/api/model/info')
def api_model_info():
    """Get model statistics."""
    with model_lock:
        if model is None:
            return _no_model()
        return jsonify({
            'stats': model.stats(),
            'closing': {str(k): v for k, v in model.closing_stats.items()},
        })


@app.route('/api/ngrams')
def api_ngrams():
    """Most frequent n-grams of one order with their probabilities."""
    order = request.args.get('order', 1, type=int)
    k = request.args.get('k', 20, type=int)

    with model_lock:
        if model is None:
            return _no_model()
        if not 1 <= order <= model.max_order:
            return jsonify({'error': f'order must be between 1 and {model.max_order}'}), 400

        entries = []
        try:
            for entry in model.smoother.score_order(model.counts, order):
                if len(entries) >= k:
                    break
                entries.append({
                    'ngram': entry.ngram,
                    'count': entry.count,
                    'probability': format_number(entry.probability),
                    'log2_probability': format_number(entry.log2_probability),
                })
        except MissingContextError as e:
            return jsonify({'error': str(e)}), 400

    return jsonify({'order': order, 'ngrams': entries})


@app.route('/api/model.lm')
def api_model_file():
    """Download the model in the text model format."""
    with model_lock:
        if model is None:
            return _no_model()
        buf = io.StringIO()
        try:
            model.write(buf)
        except MissingContextError as e:
            return jsonify({'error': str(e)}), 400

    return Response(buf.getvalue(), mimetype='text/plain',
                    headers={'Content-Disposition': 'attachment; filename=model.lm'})
