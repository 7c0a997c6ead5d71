"""심볼 코드와 원본 파싱 테이블."""
