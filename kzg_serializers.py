"""
KZG 데이터 직렬화/역직렬화 헬퍼
================================

TinyDB(JSON)에 저장하거나 전송 가능한 형태로 KZG 객체를 변환한다.
FR, G1, G2, Config, Setup, OpeningProof 등.

Setup 직렬화에는 τ가 들어가지 않는다 (Setup 객체 자체가 τ를 갖지 않는다).
"""

from py_ecc import optimized_bn128 as bn128

from zkp.kzg.config import Config
from zkp.kzg.field import FR
from zkp.kzg.prover import OpeningProof
from zkp.kzg.setup import Setup


# ─── FR ───

def serialize_fr(val):
    """FR → str(int)"""
    return str(int(val))


def deserialize_fr(s):
    """str(int) → FR"""
    return FR(int(s))


# ─── G1 point ───

def serialize_g1(point):
    """G1 point → [str, str] or None"""
    if point is None:
        return None
    return [str(int(point[0])), str(int(point[1]))]


def deserialize_g1(data):
    """[str, str] or None → G1 point"""
    if data is None:
        return None
    return (bn128.FQ(int(data[0])), bn128.FQ(int(data[1])))


# ─── G2 point ───

def serialize_g2(point):
    """G2 point → [[str,str],[str,str]] or None"""
    if point is None:
        return None
    return [
        [str(int(point[0].coeffs[0])), str(int(point[0].coeffs[1]))],
        [str(int(point[1].coeffs[0])), str(int(point[1].coeffs[1]))]
    ]


def deserialize_g2(data):
    """[[str,str],[str,str]] or None → G2 point"""
    if data is None:
        return None
    return (
        bn128.FQ2([int(data[0][0]), int(data[0][1])]),
        bn128.FQ2([int(data[1][0]), int(data[1][1])])
    )


# ─── FR list ───

def serialize_fr_list(lst):
    """list[FR] → list[str]"""
    return [str(int(v)) for v in lst]


def deserialize_fr_list(data):
    """list[str] → list[FR]"""
    return [FR(int(s)) for s in data]


# ─── Config / Setup ───

def serialize_config(config):
    return {"log_n": config.log_n, "workers": config.workers}


def deserialize_config(data):
    return Config(log_n=data["log_n"], workers=data["workers"])


def serialize_setup(setup):
    """Setup → dict"""
    return {
        "config": serialize_config(setup.config),
        "srs_lagrange": [serialize_g1(p) for p in setup.srs_lagrange],
        "srs_monomial": [serialize_g1(p) for p in setup.srs_monomial],
        "g2": serialize_g2(setup.g2),
        "tau_g2": serialize_g2(setup.tau_g2),
        "c_blind": serialize_fr_list(setup.c_blind),
    }


def deserialize_setup(data):
    """dict → Setup (길이 검증 포함)"""
    return Setup(
        deserialize_config(data["config"]),
        srs_lagrange=[deserialize_g1(p) for p in data["srs_lagrange"]],
        srs_monomial=[deserialize_g1(p) for p in data["srs_monomial"]],
        g2=deserialize_g2(data["g2"]),
        tau_g2=deserialize_g2(data["tau_g2"]),
        c_blind=deserialize_fr_list(data["c_blind"]),
    )


# ─── OpeningProof ───

def serialize_opening(opening):
    """OpeningProof → dict"""
    return {
        "point": serialize_fr(opening.point),
        "evaluation": serialize_fr(opening.evaluation),
        "proof": serialize_g1(opening.proof),
    }


def deserialize_opening(data):
    """dict → OpeningProof"""
    return OpeningProof(
        point=deserialize_fr(data["point"]),
        evaluation=deserialize_fr(data["evaluation"]),
        proof=deserialize_g1(data["proof"]),
    )


# ─── 표시용 축약 ───

def _shorten(s, limit=8):
    if len(s) <= limit:
        return s
    return s[:4] + "..." + s[-4:]


def g1_short(point):
    """G1 point → 축약 문자열 (표시용)"""
    if point is None:
        return "∞"
    return f"({_shorten(str(int(point[0])))}, {_shorten(str(int(point[1])))})"


def g2_short(point):
    """G2 point → 축약 문자열 (표시용)"""
    if point is None:
        return "∞"
    x0 = str(int(point[0].coeffs[0]))
    x1 = str(int(point[0].coeffs[1]))
    return f"({_shorten(x0)}+{_shorten(x1)}i, ...)"


def fr_short(val):
    """FR → 축약 문자열 (표시용)"""
    if val is None:
        return "None"
    return _shorten(str(int(val)), limit=10)
