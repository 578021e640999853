"""
KZG 오류 타입
=============

프로토콜 코어가 발생시키는 오류는 모두 프로그래밍/설정 오류이며 재시도 대상이 아니다.
검증 실패는 오류가 아니다: verify_opening은 False를 반환한다.

모든 오류는 KZGError를 상속하고, KZGError는 ValueError를 상속한다.
(기존 코드처럼 ValueError로 잡아도 동작한다.)
"""


class KZGError(ValueError):
    """KZG 코어 오류의 기반 클래스."""


class InvalidDomainSize(KZGError):
    """요청한 FFT 도메인 크기를 스칼라 필드가 지원하지 않는다.

    2의 거듭제곱이 아니거나 2^28 (bn128 스칼라 필드의 2-adicity)을 초과할 때.
    """

    def __init__(self, size, max_size):
        self.size = size
        self.max_size = max_size
        super().__init__(
            f"FFT 도메인 크기 {size}를 지원하지 않습니다 "
            f"(2의 거듭제곱, 최대 {max_size})"
        )


class DegreeTooLarge(KZGError):
    """몫 다항식의 계수 개수가 단항식 SRS 길이를 초과한다.

    Config가 커밋된 다항식에 비해 작게 설정되었다는 뜻이며, 잘라내지 않는다.
    """

    def __init__(self, needed, available):
        self.needed = needed
        self.available = available
        super().__init__(
            f"몫 다항식에 SRS 원소 {needed}개가 필요하지만 {available}개뿐입니다"
        )


class LengthMismatch(KZGError):
    """길이가 맞아야 하는 두 벡터의 길이가 다르다 (내부 불변식 위반)."""

    def __init__(self, what, expected, actual):
        self.expected = expected
        self.actual = actual
        super().__init__(f"{what}: 길이 {expected}을(를) 기대했지만 {actual}입니다")


class ExactDivisionFailure(KZGError):
    """(x - z)로 나눈 나머지가 0이 아니다.

    평가값과 계수 표현이 어긋났다는 뜻이다. 정상 사용에서는 도달할 수 없다.
    """
