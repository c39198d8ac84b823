class ConfigurationError(RuntimeError):
    """필수 설정 누락/오류. 네트워크 호출 전에 발생합니다."""


class TransportError(RuntimeError):
    """Jira/Bitbucket HTTP 통신 실패"""


class BuildError(RuntimeError):
    """외부 빌드 단계 실패 (출력 파일은 이미 기록된 상태)"""
