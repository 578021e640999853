"""
KZG 기반 모듈: 유한체(Finite Field) 및 타원곡선 연산
======================================================

KZG 프로토콜 전체에서 사용되는 기본 대수적 도구를 정의한다.

**유한체 FR**:
  bn128(BN254) 타원곡선의 스칼라 필드. 위트니스, 다항식 계수, 평가값,
  블라인딩 벡터가 모두 FR 원소이다.
  - 위수(order) r ≈ 2^254, 소수체(prime field)
  - r - 1 = 2^28 × m (m은 홀수) → 최대 2^28차 단위근을 지원

**타원곡선 점의 두 가지 표현**:
  - 아핀(affine) 표현 (x, y): 외부에 노출되는 표준 표현. 항등원은 None.
    커밋먼트, 열기 증명, SRS 벡터가 이 형태로 저장된다.
  - 야코비안(Jacobian) 표현 (X, Y, Z): py_ecc.optimized_bn128 내부의 누적용 표현.
    역원 계산 없이 덧셈이 가능하므로 MSM과 그룹 FFT 내부에서만 사용한다.

**해시 → 필드**:
  SHA-256 다이제스트를 빅엔디안 정수로 읽고 r로 축소한다.

사용 예시:
    >>> from zkp.kzg.field import FR, G1, ec_mul
    >>> P = ec_mul(G1, FR(5))    # 5·G1 (아핀)
    >>> hash_to_field(fr_to_bytes(FR(7)))
"""

import hashlib
import secrets

from py_ecc import optimized_bn128 as bn128
from py_ecc.fields import bn128_FQ as FQ


# ─────────────────────────────────────────────────────────────────────
# 유한체(Finite Field) FR
# ─────────────────────────────────────────────────────────────────────

class FR(FQ):
    """bn128 스칼라 필드 위의 유한체 원소.

    py_ecc의 FQ 클래스를 상속하여 +, -, *, /, ** 등의 필드 연산을 제공한다.

    예시:
        >>> x = FR(3)
        >>> x * x          # FR(9)
        >>> FR(1) / FR(3)   # 3의 모듈러 역원
    """
    field_modulus = bn128.curve_order


# 곡선 위수 (필드 크기)
CURVE_ORDER = bn128.curve_order

# FR*의 생성자와 2-adicity: r - 1 = 2^28 · m
MULTIPLICATIVE_GENERATOR = 5
TWO_ADICITY = 28

# 표준 바이트 인코딩 길이
FR_BYTES = 32


def random_scalar(rng=None):
    """FR에서 균등하게 원소를 뽑는다.

    Args:
        rng: randrange를 가진 난수 생성기 (random.Random 등).
             None이면 OS CSPRNG(secrets)를 사용한다.
    """
    if rng is None:
        return FR(secrets.randbelow(CURVE_ORDER))
    return FR(rng.randrange(CURVE_ORDER))


def random_nonzero_scalar(rng=None):
    """FR*에서 균등하게 원소를 뽑는다."""
    if rng is None:
        return FR(secrets.randbelow(CURVE_ORDER - 1) + 1)
    return FR(rng.randrange(1, CURVE_ORDER))


def fr_to_bytes(value):
    """FR 원소의 표준 고정 길이 인코딩 (32바이트 빅엔디안)."""
    return int(value).to_bytes(FR_BYTES, "big")


def fr_from_bytes(data):
    """임의의 바이트열을 빅엔디안 정수로 읽어 r로 축소한다."""
    return FR(int.from_bytes(data, "big"))


def hash_to_field(data):
    """SHA-256(data)를 FR 원소로 변환한다."""
    return fr_from_bytes(hashlib.sha256(data).digest())


# ─────────────────────────────────────────────────────────────────────
# 타원곡선 상수 및 표현 변환
# ─────────────────────────────────────────────────────────────────────

# 야코비안 생성자 (py_ecc.optimized_bn128)
G1_JACOBIAN = bn128.G1
G2_JACOBIAN = bn128.G2
Z1_JACOBIAN = bn128.Z1
Z2_JACOBIAN = bn128.Z2

# 아핀 생성자
G1 = bn128.normalize(bn128.G1)
G2 = bn128.normalize(bn128.G2)

# 영점 (point at infinity) - 아핀 표현의 항등원
Z1 = None
Z2 = None


def to_jacobian(point, identity=Z1_JACOBIAN):
    """아핀 점 → 야코비안 점.

    None(항등원)은 identity로 변환된다. G2 점이면 identity=Z2_JACOBIAN을 넘긴다.
    """
    if point is None:
        return identity
    x, y = point
    return (x, y, x.one())


def to_affine(point):
    """야코비안 점 → 아핀 점. 항등원은 None."""
    if bn128.is_inf(point):
        return None
    return bn128.normalize(point)


def _scalar_int(scalar):
    return int(scalar) % CURVE_ORDER


# ─────────────────────────────────────────────────────────────────────
# 아핀 점 연산 (G1, G2 공통)
# ─────────────────────────────────────────────────────────────────────

def ec_mul(point, scalar):
    """타원곡선 스칼라 곱셈: scalar · point.

    Args:
        point: G1 또는 G2 위의 아핀 점 (None은 항등원)
        scalar: 정수 또는 FR 원소

    Returns:
        scalar · point (같은 그룹의 아핀 점)
    """
    if point is None:
        return None
    return to_affine(bn128.multiply(to_jacobian(point), _scalar_int(scalar)))


def ec_add(p1, p2):
    """타원곡선 점 덧셈: p1 + p2."""
    if p1 is None:
        return p2
    if p2 is None:
        return p1
    return to_affine(bn128.add(to_jacobian(p1), to_jacobian(p2)))


def ec_neg(point):
    """타원곡선 점의 역원: -point."""
    if point is None:
        return None
    x, y = point
    return (x, -y)


def ec_sub(p1, p2):
    """타원곡선 점 뺄셈: p1 - p2."""
    return ec_add(p1, ec_neg(p2))


def ec_eq(p1, p2):
    """두 아핀 점이 같은지 비교한다."""
    if p1 is None or p2 is None:
        return p1 is None and p2 is None
    return p1[0] == p2[0] and p1[1] == p2[1]


def is_identity(point):
    return point is None


def is_on_curve_g1(point):
    """G1 곡선 위의 점인지 확인한다 (항등원 포함)."""
    if point is None:
        return True
    try:
        return bn128.is_on_curve(to_jacobian(point), bn128.b)
    except (TypeError, AttributeError, ValueError):
        return False


def is_on_curve_g2(point):
    """G2 (뒤틀린 곡선) 위의 점인지 확인한다 (항등원 포함)."""
    if point is None:
        return True
    try:
        return bn128.is_on_curve(to_jacobian(point), bn128.b2)
    except (TypeError, AttributeError, ValueError):
        return False


def random_g1(rng=None):
    """G1에서 균등하게 뽑은 생성자: k·G1 (k ∈ FR*)."""
    return to_affine(bn128.multiply(G1_JACOBIAN, int(random_nonzero_scalar(rng))))


def random_g2(rng=None):
    """G2에서 균등하게 뽑은 생성자: k·G2 (k ∈ FR*)."""
    return to_affine(bn128.multiply(G2_JACOBIAN, int(random_nonzero_scalar(rng))))


def ec_pairing(g2_point, g1_point):
    """쌍선형 페어링 e(G1, G2) → GT.

    bn128의 optimal Ate 페어링을 수행한다.

    주의:
        py_ecc의 pairing 인자 순서는 (G2, G1)이다.
    """
    return bn128.pairing(
        to_jacobian(g2_point, identity=Z2_JACOBIAN),
        to_jacobian(g1_point, identity=Z1_JACOBIAN),
    )


# ─────────────────────────────────────────────────────────────────────
# 단위근 (Roots of Unity)
# ─────────────────────────────────────────────────────────────────────

def is_supported_domain_size(n):
    """n이 2의 거듭제곱이고 2^TWO_ADICITY 이하인지."""
    return isinstance(n, int) and n >= 1 and (n & (n - 1)) == 0 and n <= (1 << TWO_ADICITY)


def get_root_of_unity(n):
    """n차 원시 단위근 ω를 반환한다.

    생성자 g = FR(5)를 사용하여 ω = g^((r-1)/n)으로 계산한다.
    호출자가 n의 유효성을 먼저 확인해야 한다 (is_supported_domain_size).

    예시:
        >>> omega = get_root_of_unity(4)
        >>> omega ** 4 == FR(1)  # True
        >>> omega ** 2 != FR(1)  # True (원시 단위근)
    """
    if n == 1:
        return FR(1)
    return FR(MULTIPLICATIVE_GENERATOR) ** ((CURVE_ORDER - 1) // n)
