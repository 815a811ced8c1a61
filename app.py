from flask import Flask, jsonify
from werkzeug.exceptions import RequestEntityTooLarge

from config import Config
from models import db
from routes.career_routes import career_bp
from routes.interview_routes import interview_bp
from services.ai_service import GeminiTextGenerator


def build_text_generator(config) -> GeminiTextGenerator:
    return GeminiTextGenerator(
        api_key=config.get("GEMINI_API_KEY", ""),
        model=config.get("GEMINI_MODEL", "gemini-2.5-flash"),
        temperature=config.get("GEMINI_TEMPERATURE", 0.7),
        max_output_tokens=config.get("GEMINI_MAX_OUTPUT_TOKENS", 1024),
    )


def create_app(overrides=None, text_generator=None) -> Flask:
    app = Flask(__name__)
    app.config.from_object(Config)
    if overrides:
        app.config.update(overrides)
    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))

    if text_generator is None:
        if not app.config.get("GEMINI_API_KEY"):
            app.logger.warning("GEMINI_API_KEY is empty. AI features will use fallbacks or fail.")
        text_generator = build_text_generator(app.config)
    app.extensions["text_generator"] = text_generator

    db.init_app(app)
    app.register_blueprint(career_bp)
    app.register_blueprint(interview_bp)

    @app.errorhandler(RequestEntityTooLarge)
    def file_too_large(_exc):
        return jsonify({"error": "Uploaded file is too large."}), 413

    with app.app_context():
        db.create_all()

    return app


if __name__ == "__main__":
    create_app().run(debug=True)
