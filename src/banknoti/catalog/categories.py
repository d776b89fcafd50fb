"""Keyword table used to guess a spending category from a merchant name."""

from banknoti.models import SpendingCategory as C

# Evaluated in order; the first category with a keyword contained in the
# (lowercased) merchant name wins.
CATEGORY_KEYWORDS: tuple[tuple[C, tuple[str, ...]], ...] = (
    (C.CAFE_SNACK, (
        "스타벅스", "투썸", "이디야", "메가커피", "컴포즈", "빽다방", "할리스",
        "파스쿠찌", "카페베네", "엔제리너스", "탐앤탐스", "커피빈", "폴바셋",
        "블루보틀", "커피", "카페", "cafe", "coffee", "던킨", "크리스피",
        "배스킨라빈스", "베스킨", "아이스크림", "설빙", "빙수", "GS25", "CU", "세븐일레븐",
        "이마트24", "미니스톱", "편의점",
    )),
    (C.DINING_OUT, (
        "맥도날드", "버거킹", "롯데리아", "KFC", "맘스터치", "노브랜드버거",
        "피자헛", "도미노", "파파존스", "미스터피자", "피자",
        "김밥천국", "본죽", "죽이야기", "한솥", "놀부", "새마을식당", "백종원",
        "빕스", "애슐리", "아웃백", "뷔페", "고기", "삼겹살", "갈비",
        "치킨", "BBQ", "BHC", "굽네", "교촌", "네네치킨", "호식이",
        "식당", "레스토랑", "맛집",
    )),
    (C.DELIVERY, ("배달의민족", "배민", "요기요", "쿠팡이츠", "위메프오", "땡겨요")),
    (C.GROCERY, (
        "이마트", "홈플러스", "롯데마트", "코스트코", "트레이더스",
        "하나로마트", "농협마트", "GS슈퍼", "롯데슈퍼", "마트",
        "슈퍼", "시장", "청과", "정육",
    )),
    (C.ONLINE_SHOPPING, (
        "쿠팡", "coupang", "네이버페이", "naverpay", "카카오페이", "kakaopay",
        "G마켓", "gmarket", "옥션", "auction", "11번가", "위메프", "티몬",
        "인터파크", "SSG", "신세계몰", "롯데온", "무신사", "29cm", "지그재그",
        "에이블리", "브랜디", "번개장터", "당근마켓", "중고나라",
        "아마존", "amazon", "알리익스프레스", "aliexpress", "테무", "temu",
    )),
    (C.CLOTHING, (
        "유니클로", "ZARA", "H&M", "자라", "에잇세컨즈", "탑텐",
        "스파오", "미쏘", "폴로", "나이키", "아디다스", "뉴발란스",
        "푸마", "휠라", "의류", "옷", "패션",
    )),
    (C.TRANSPORTATION, (
        "버스", "지하철", "전철", "코레일", "KTX", "SRT", "ITX",
        "티머니", "캐시비", "교통카드", "철도",
    )),
    (C.TAXI, ("카카오택시", "타다", "우버", "택시", "TAXI")),
    (C.CAR, (
        "주유소", "GS칼텍스", "SK에너지", "현대오일뱅크", "S-OIL", "알뜰주유소",
        "세차", "정비", "타이어", "오토", "자동차", "하이패스",
    )),
    (C.PARKING, ("주차", "파킹", "parking")),
    (C.OTT, (
        "넷플릭스", "netflix", "유튜브", "youtube", "웨이브", "wavve",
        "티빙", "tving", "왓챠", "watcha", "디즈니", "disney",
        "애플TV", "appletv", "쿠팡플레이", "아마존프라임",
    )),
    (C.MUSIC, (
        "멜론", "melon", "지니", "genie", "플로", "flo", "벅스", "bugs",
        "스포티파이", "spotify", "애플뮤직", "applemusic", "유튜브뮤직",
    )),
    (C.GAME, (
        "구글플레이", "googleplay", "앱스토어", "appstore", "넥슨", "nexon",
        "넷마블", "netmarble", "NC", "엔씨", "스팀", "steam", "게임", "game",
    )),
    (C.MOVIE, ("CGV", "메가박스", "롯데시네마", "영화", "시네마", "cinema")),
    (C.TRAVEL, (
        "야놀자", "여기어때", "호텔", "모텔", "펜션", "에어비앤비", "airbnb",
        "아고다", "부킹닷컴", "트립닷컴", "호텔스닷컴", "여행", "항공",
    )),
    (C.HEALTH, (
        "병원", "의원", "클리닉", "약국", "pharmacy", "헬스", "gym",
        "필라테스", "요가", "PT", "피트니스",
    )),
    (C.BEAUTY, (
        "미용실", "헤어", "hair", "네일", "nail", "피부과", "성형",
        "올리브영", "롭스", "화장품", "뷰티",
    )),
    (C.EDUCATION, (
        "학원", "학교", "대학", "어학", "영어", "수학", "과외",
        "인강", "클래스101", "탈잉", "숨고",
    )),
    (C.INSURANCE, (
        "삼성생명", "한화생명", "교보생명", "메리츠", "DB손해", "현대해상",
        "보험", "insurance",
    )),
    (C.INTERNET_PHONE, ("SKT", "KT통신", "케이티", "LG유플러스", "알뜰폰", "통신", "인터넷")),
    (C.UTILITIES, ("한국전력", "전기", "가스", "수도", "관리비", "공과금")),
    (C.TRANSFER, ("이체", "송금", "입금", "출금")),
    (C.ATM, ("ATM", "현금", "인출")),
)


def match_category_keyword(merchant_name: str) -> tuple[C, str] | None:
    """Return the first (category, keyword) whose keyword the name contains."""
    lowered = merchant_name.lower()
    if not lowered:
        return None
    for category, keywords in CATEGORY_KEYWORDS:
        for keyword in keywords:
            if keyword.lower() in lowered:
                return category, keyword
    return None
