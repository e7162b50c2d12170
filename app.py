import logging
import traceback

from flask import Flask, request
from flask_cors import CORS
from werkzeug.exceptions import RequestEntityTooLarge

from config import Config
from ai.src.errors import AnalysisError, MissingCredentialError
from ai.src.image_handler import read_image_upload
from ai.src.outfit_analyzer import analyze_outfit, check_models, generate_comparison

Config.configure_logging()

app = Flask(__name__)
app.config.from_object(Config)

# CORS configuration for frontend
CORS(app,
     origins=Config.CORS_ORIGINS,
     allow_headers=["Content-Type"],
     methods=["GET", "POST", "OPTIONS"])


def _require_api_key():
    if not Config.get_api_key():
        raise MissingCredentialError()


def _error_response(error: AnalysisError):
    logging.error(f"{type(error).__name__}: {error}")
    return {"error": error.user_message}, error.status_code


def _unexpected_error_response(route: str, error: Exception, message: str):
    logging.error(f"CRITICAL ERROR in {route}: {error}")
    logging.error(traceback.format_exc())
    return {"error": message}, 500


@app.errorhandler(RequestEntityTooLarge)
def upload_too_large(_error):
    return {"error": "이미지 파일이 너무 큽니다."}, 413


@app.route('/')
def index():
    """Homepage che mostra lo stato della configurazione Gemini."""
    return {
        "message": "Welcome to the Celebrity Outfit Dupe Finder API",
        "status": "running",
        "gemini_key": "configured" if Config.get_api_key() else "missing"
    }, 200


@app.route('/api/analyze', methods=['POST'])
def analyze():
    """Analisi testuale libera della foto di un outfit.

    Riceve multipart/form-data con il campo `image`.
    La chiave Gemini viene controllata prima di leggere l'immagine.
    Risposte:
      - 500 se la chiave Gemini non è configurata
      - 400 se manca l'immagine
      - 200 con {result: "..."}
      - 4xx/5xx con {error: "..."} se Gemini fallisce
    """
    try:
        _require_api_key()
        image_bytes, mime_type = read_image_upload(request.files.get('image'), Config.DEFAULT_MIME_TYPE)
        text = analyze_outfit(image_bytes, mime_type)

        return {"result": text}, 200

    except AnalysisError as e:
        return _error_response(e)
    except RequestEntityTooLarge:
        raise
    except Exception as e:
        return _unexpected_error_response('analyze', e, "AI 분석 중 오류가 발생했습니다.")


@app.route('/api/automate', methods=['POST'])
def automate():
    """Confronto tra i capi della celebrità e le alternative economiche.

    Riceve multipart/form-data con il campo `image`.
    La chiave Gemini viene controllata prima di leggere l'immagine.
    Risposte:
      - 500 se la chiave Gemini non è configurata
      - 400 se manca l'immagine
      - 200 con {celebrityItems: [...], budgetItems: [...], totalCelebPrice, ...}
      - 502 se la risposta di Gemini non è JSON o non ha la forma attesa
      - 4xx/5xx con {error: "..."} se Gemini fallisce
    """
    try:
        _require_api_key()
        image_bytes, mime_type = read_image_upload(request.files.get('image'), Config.DEFAULT_MIME_TYPE)
        comparison = generate_comparison(image_bytes, mime_type)

        return comparison, 200

    except AnalysisError as e:
        return _error_response(e)
    except RequestEntityTooLarge:
        raise
    except Exception as e:
        return _unexpected_error_response('automate', e, "자동 콘텐츠 생성 중 오류가 발생했습니다.")


@app.route('/api/check-models', methods=['GET'])
def check_models_route():
    """Verifica quali modelli Gemini rispondono con la chiave configurata."""
    try:
        return check_models(), 200

    except AnalysisError as e:
        return _error_response(e)
    except Exception as e:
        return _unexpected_error_response('check_models', e, "모델 확인 중 오류 발생")


if __name__ == '__main__':
    app.run(host='0.0.0.0', port=8000, debug=True)
