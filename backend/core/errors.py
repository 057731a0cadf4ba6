"""저장소 계층 예외 정의.

모든 실패는 호출자에게 동기적으로 전달되며 내부 재시도는 하지 않는다.
조회 결과 없음은 예외가 아니라 None으로 표현한다.
"""


class StoreError(Exception):
    """실행 로그 저장소 예외의 기반 클래스."""


class ConfigurationMissing(StoreError):
    """필수 접속 설정 누락. 서비스 시작 중단."""


class MigrationFailure(StoreError):
    """스키마 변경 적용 실패. 서비스 시작 중단."""


class ConstraintViolation(StoreError):
    """기본키 중복 등 제약조건 위반."""


class InvalidArgument(StoreError, ValueError):
    """빈 job 필터, 알 수 없는 상태값 등 잘못된 인자."""
