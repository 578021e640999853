"""
KZG 커밋먼트 데모 서비스
========================

  KZG_DB_PATH    TinyDB 파일 경로 (없으면 메모리 DB)
  KZG_LOG_LEVEL  로그 레벨 (기본값: INFO)

실행:
    $ flask --app app run
"""

import logging
import os

from flask import Flask, jsonify
from tinydb import TinyDB
from tinydb.storages import MemoryStorage

from kzg_routes import kzg_bp, init_kzg_bp

logging.basicConfig(
    level=os.getenv("KZG_LOG_LEVEL", "INFO"),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)


def create_app(db_path=None):
    """Flask 앱을 만들고 KZG blueprint에 DB를 주입한다."""
    if db_path:
        DB = TinyDB(db_path)               #Storage DB
    else:
        DB = TinyDB(storage=MemoryStorage)  #Memory DB

    app = Flask(__name__)
    init_kzg_bp(DB.table("kzg"))
    app.register_blueprint(kzg_bp)

    @app.route("/")
    def index():
        return jsonify({
            "service": "kzg",
            "endpoints": sorted(str(rule) for rule in app.url_map.iter_rules()
                                if str(rule).startswith("/kzg")),
        })

    return app


app = create_app(os.getenv("KZG_DB_PATH"))

if __name__ == "__main__":
    app.run(debug=True)
