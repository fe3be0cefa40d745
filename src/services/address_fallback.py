"""src.services.address_fallback
상세 주소 → 단계적으로 단순화한 주소 후보 리스트 생성

Nominatim은 행정구역 단위 검색에는 강하지만 가게명 같은 상세 장소명이 포함되면
결과를 못 찾는 경우가 많아, 구체적인 주소부터 국가명까지 차례로 시도합니다.
"""


def generate_address_fallbacks(address: str) -> list[str]:
    """
    쉼표로 구분된 주소에서 Geocoding 후보 리스트를 생성합니다.

    Args:
        address: 상세 주소 (예: "Village Coffee, Castle Hill Village, Canterbury, New Zealand")

    Returns:
        list[str]: 중복 없는 후보 리스트 (구체적인 주소가 먼저)

    Examples:
        >>> generate_address_fallbacks("Village Coffee, Castle Hill Village, Canterbury, New Zealand")
        ['Village Coffee, Castle Hill Village, Canterbury, New Zealand', 'Castle Hill Village, Canterbury, New Zealand', 'Canterbury, New Zealand', 'New Zealand']
    """
    parts = [part.strip() for part in address.split(",")]
    variations = [address]

    # 장소명, 지역, 광역, 국가 → 장소명 제외
    if len(parts) >= 4:
        variations.append(", ".join(parts[1:]))

    # 광역 + 국가
    if len(parts) >= 3:
        variations.append(", ".join(parts[-2:]))

    # 국가만
    if len(parts) >= 2:
        variations.append(parts[-1])

    return list(dict.fromkeys(variations))
