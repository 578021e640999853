"""
KZG Flask Blueprint: 커밋/열기/검증 데모 엔드포인트
====================================================

모든 응답은 JSON이다. 프로토콜 상태는 TinyDB에 직렬화되어 저장된다.

  POST /kzg/setup    {"log_n": int}         SRS 생성 (하위 상태 초기화)
  POST /kzg/prove                           위트니스 커밋
  POST /kzg/open     {"point": str?}        열기 증명 추가 (없으면 난수 점)
  POST /kzg/verify                          저장된 모든 열기 증명 검증
  POST /kzg/tamper   {"index": int?}        저장된 평가값의 최하위 비트 반전
  GET  /kzg/state                           현재 상태 요약
  POST /kzg/clear                           모든 상태 삭제
  POST /kzg/demo     {"log_n": int}         전체 흐름을 한 번에 실행 (상태 저장 없음)

선행 단계가 없으면 409, 입력이 잘못되면 400을 반환한다.
"""

import dataclasses
import logging
import os

from flask import Blueprint, jsonify, request
from tinydb import Query

from zkp.kzg.config import Config
from zkp.kzg.demo import run_demo
from zkp.kzg.field import FR, random_scalar
from zkp.kzg.prover import Prover
from zkp.kzg.setup import Setup
from zkp.kzg.verifier import Verifier

from kzg_serializers import (
    serialize_fr_list, deserialize_fr_list,
    serialize_g1, deserialize_g1,
    serialize_setup, deserialize_setup,
    serialize_opening, deserialize_opening,
    g1_short, g2_short, fr_short,
)

logger = logging.getLogger(__name__)

kzg_bp = Blueprint('kzg', __name__, url_prefix='/kzg')

# 순수 파이썬 페어링 연산이므로 데모 크기를 제한한다
DEMO_MAX_LOG_N = int(os.getenv("KZG_DEMO_MAX_LOG_N", 8))

DATA = Query()

# DB는 app.py에서 주입
DB = None


def init_kzg_bp(db):
    """app.py에서 DB를 주입받는다."""
    global DB
    DB = db


# ─── DB 헬퍼 ───

def db_get(key):
    """DB에서 키로 데이터를 조회한다."""
    result = DB.search(DATA.type == key)
    if not result:
        return None
    return result[0].get("data")


def db_set(key, data):
    """DB에 키로 데이터를 저장한다."""
    DB.upsert({"type": key, "data": data}, DATA.type == key)


def db_remove_prefix(prefix):
    """prefix로 시작하는 모든 키를 삭제한다."""
    DB.remove(DATA.type.test(lambda t: t.startswith(prefix)))


def _error(message, status):
    return jsonify({"error": message}), status


def _load_setup():
    raw = db_get("kzg.setup.raw")
    return deserialize_setup(raw) if raw else None


def _request_body():
    """JSON 객체 본문. 본문이 없으면 빈 dict, 객체가 아니면 ValueError."""
    body = request.get_json(silent=True)
    if body is None:
        return {}
    if not isinstance(body, dict):
        raise ValueError("요청 본문은 JSON 객체여야 합니다")
    return body


def _demo_config(body):
    log_n = int(body.get("log_n", 2))
    if log_n > DEMO_MAX_LOG_N:
        raise ValueError(f"데모에서 log_n은 {DEMO_MAX_LOG_N} 이하여야 합니다")
    return Config(log_n=log_n)


# ──────────────────────────────────────────────────────────────
# Setup / Prove
# ──────────────────────────────────────────────────────────────

@kzg_bp.route("/setup", methods=["POST"])
def setup_srs():
    """SRS를 생성한다."""
    try:
        setup = Setup.generate(_demo_config(_request_body()))
    except (TypeError, ValueError) as e:
        return _error(str(e), 400)

    db_set("kzg.setup.raw", serialize_setup(setup))
    info = {
        "log_n": setup.config.log_n,
        "n": setup.config.n,
        "two_n": setup.config.two_n,
        "g1": g1_short(setup.g1),
        "g2": g2_short(setup.g2),
        "tau_g2": g2_short(setup.tau_g2),
        "lagrange_samples": [g1_short(p) for p in setup.srs_lagrange[:4]],
    }
    db_set("kzg.setup.info", info)

    # SRS 변경 시 하위 데이터 클리어
    db_remove_prefix("kzg.prover.")
    db_remove_prefix("kzg.verify.")
    return jsonify(info)


@kzg_bp.route("/prove", methods=["POST"])
def prove():
    """위트니스를 커밋한다."""
    setup = _load_setup()
    if setup is None:
        return _error("setup이 필요합니다", 409)

    commitment, evals = Prover(setup).prove()
    db_set("kzg.prover.commitment", serialize_g1(commitment))
    db_set("kzg.prover.evals", serialize_fr_list(evals))
    db_set("kzg.prover.openings", [])
    db_remove_prefix("kzg.verify.")
    return jsonify({"commitment": g1_short(commitment), "evals": len(evals)})


# ──────────────────────────────────────────────────────────────
# Opening / Verify
# ──────────────────────────────────────────────────────────────

@kzg_bp.route("/open", methods=["POST"])
def open_at_point():
    """열기 증명을 만들어 저장한다."""
    setup = _load_setup()
    evals_raw = db_get("kzg.prover.evals")
    if setup is None or evals_raw is None:
        return _error("setup과 prove가 필요합니다", 409)

    try:
        body = _request_body()
        point = FR(int(body["point"])) if "point" in body else random_scalar()
    except (TypeError, ValueError) as e:
        return _error(str(e), 400)

    opening = Prover(setup).create_opening_proof(deserialize_fr_list(evals_raw), point)

    openings = db_get("kzg.prover.openings") or []
    openings.append(serialize_opening(opening))
    db_set("kzg.prover.openings", openings)
    db_remove_prefix("kzg.verify.")
    return jsonify({
        "index": len(openings) - 1,
        "point": fr_short(opening.point),
        "evaluation": fr_short(opening.evaluation),
        "proof": g1_short(opening.proof),
    })


@kzg_bp.route("/verify", methods=["POST"])
def verify_openings():
    """저장된 모든 열기 증명을 검증한다."""
    setup = _load_setup()
    commitment_raw = db_get("kzg.prover.commitment")
    openings = db_get("kzg.prover.openings")
    if setup is None or commitment_raw is None or not openings:
        return _error("setup, prove, open이 필요합니다", 409)

    verifier = Verifier(setup)
    commitment = deserialize_g1(commitment_raw)
    results = [verifier.verify_opening(commitment, deserialize_opening(o)) for o in openings]
    db_set("kzg.verify.results", results)
    return jsonify({"results": results})


@kzg_bp.route("/tamper", methods=["POST"])
def tamper():
    """저장된 열기 증명 하나의 평가값 최하위 비트를 뒤집는다."""
    openings = db_get("kzg.prover.openings")
    if not openings:
        return _error("열기 증명이 없습니다", 409)

    try:
        index = int(_request_body().get("index", 0))
        if index < 0:
            raise IndexError(f"index는 0 이상이어야 합니다: {index}")
        opening = deserialize_opening(openings[index])
    except (TypeError, ValueError, IndexError) as e:
        return _error(str(e), 400)

    flipped = FR(int(opening.evaluation) ^ 1)
    openings[index] = serialize_opening(dataclasses.replace(opening, evaluation=flipped))
    db_set("kzg.prover.openings", openings)
    db_remove_prefix("kzg.verify.")
    logger.info("Tampered opening #%d", index)
    return jsonify({"index": index, "evaluation": fr_short(flipped)})


# ──────────────────────────────────────────────────────────────
# 상태
# ──────────────────────────────────────────────────────────────

@kzg_bp.route("/state")
def state():
    """현재 상태 요약."""
    commitment_raw = db_get("kzg.prover.commitment")
    openings = db_get("kzg.prover.openings") or []
    return jsonify({
        "setup": db_get("kzg.setup.info"),
        "commitment": g1_short(deserialize_g1(commitment_raw)) if commitment_raw else None,
        "openings": len(openings),
        "results": db_get("kzg.verify.results"),
    })


@kzg_bp.route("/clear", methods=["POST"])
def clear():
    """모든 KZG 상태를 삭제한다."""
    db_remove_prefix("kzg.")
    return jsonify({"cleared": True})


@kzg_bp.route("/demo", methods=["POST"])
def demo():
    """setup → prove → 열기 3회 → 조작된 열기까지 한 번에 실행한다."""
    try:
        config = _demo_config(_request_body())
    except (TypeError, ValueError) as e:
        return _error(str(e), 400)
    return jsonify(run_demo(config))
