"""Default merchant table.

Order matters: detection is first-match-wins, so longer or more specific
keywords must precede entries whose keywords they contain, and the
keywordless "other" entry stays last.
"""

from banknoti.models import Merchant
from banknoti.models import SpendingCategory as C

OTHER_MERCHANT_ID = "other"


def _m(merchant_id: str, name: str, keywords: tuple[str, ...], category: C, icon: str) -> Merchant:
    return Merchant(
        id=merchant_id,
        display_name=name,
        keywords=keywords,
        default_category=category,
        icon=icon,
    )


DEFAULT_MERCHANTS: tuple[Merchant, ...] = (
    # Online shopping
    _m("coupang", "쿠팡", ("쿠팡", "COUPANG", "로켓배송"), C.ONLINE_SHOPPING, "📦"),
    _m("naver_shopping", "네이버쇼핑", ("네이버페이", "NAVERPAY", "네이버쇼핑"), C.ONLINE_SHOPPING, "🛒"),
    _m("gmarket", "G마켓", ("G마켓", "GMARKET", "지마켓"), C.ONLINE_SHOPPING, "🛒"),
    _m("auction", "옥션", ("옥션", "AUCTION"), C.ONLINE_SHOPPING, "🛒"),
    _m("11st", "11번가", ("11번가", "11ST"), C.ONLINE_SHOPPING, "🛒"),
    _m("tmon", "티몬", ("티몬", "TMON", "티켓몬스터"), C.ONLINE_SHOPPING, "🛒"),
    _m("wemakeprice", "위메프", ("위메프", "WEMAKEPRICE"), C.ONLINE_SHOPPING, "🛒"),
    _m("ssg", "SSG닷컴", ("SSG", "쓱닷컴", "신세계몰"), C.ONLINE_SHOPPING, "🛒"),
    _m("lotte_on", "롯데온", ("롯데온", "LOTTE ON"), C.ONLINE_SHOPPING, "🛒"),
    _m("aliexpress", "알리익스프레스", ("알리익스프레스", "ALIEXPRESS", "알리"), C.ONLINE_SHOPPING, "🌏"),
    _m("temu", "테무", ("테무", "TEMU"), C.ONLINE_SHOPPING, "🌏"),
    _m("amazon", "아마존", ("아마존", "AMAZON", "AMZN"), C.ONLINE_SHOPPING, "📦"),
    _m("ebay", "이베이", ("이베이", "EBAY"), C.ONLINE_SHOPPING, "🌏"),
    _m("shein", "쉬인", ("쉬인", "SHEIN"), C.ONLINE_SHOPPING, "🌏"),
    _m("iherb", "아이허브", ("아이허브", "IHERB"), C.ONLINE_SHOPPING, "🌏"),
    _m("shopee", "쇼피", ("쇼피", "SHOPEE"), C.ONLINE_SHOPPING, "🌏"),
    _m("lazada", "라자다", ("라자다", "LAZADA"), C.ONLINE_SHOPPING, "🌏"),
    _m("wish", "위시", ("위시", "WISH"), C.ONLINE_SHOPPING, "⭐"),
    _m("farfetch", "파페치", ("파페치", "FARFETCH"), C.CLOTHING, "👜"),
    _m("ssense", "센스", ("SSENSE", "센스"), C.CLOTHING, "👜"),
    _m("mytheresa", "마이테레사", ("MYTHERESA", "마이테레사"), C.CLOTHING, "👜"),
    _m("matchesfashion", "매치스패션", ("MATCHES", "매치스"), C.CLOTHING, "👗"),
    _m("asos", "에이소스", ("ASOS", "에이소스"), C.CLOTHING, "👜"),
    _m("zappos", "자포스", ("ZAPPOS", "자포스"), C.SHOES_BAG, "👟"),
    _m("stockx", "스톡엑스", ("STOCKX", "스톡엑스"), C.SHOES_BAG, "👟"),
    _m("etsy", "엣시", ("ETSY", "엣시"), C.ONLINE_SHOPPING, "🎨"),
    _m("banggood", "뱅굿", ("BANGGOOD", "뱅굿"), C.ONLINE_SHOPPING, "📱"),
    _m("gearbest", "기어베스트", ("GEARBEST", "기어베스트"), C.ELECTRONICS, "🧰"),
    _m("dhgate", "디에이치게이트", ("DHGATE",), C.ONLINE_SHOPPING, "🌏"),
    _m("taobao", "타오바오", ("타오바오", "TAOBAO", "淘宝"), C.ONLINE_SHOPPING, "🇨🇳"),
    _m("jd", "징동", ("징동", "JD.COM", "京东"), C.ONLINE_SHOPPING, "🇨🇳"),
    _m("rakuten", "라쿠텐", ("라쿠텐", "RAKUTEN", "楽天"), C.ONLINE_SHOPPING, "🇯🇵"),
    # Delivery
    _m("baemin", "배달의민족", ("배달의민족", "배민", "BAEMIN"), C.DELIVERY, "🛵"),
    _m("yogiyo", "요기요", ("요기요", "YOGIYO"), C.DELIVERY, "🛵"),
    _m("coupang_eats", "쿠팡이츠", ("쿠팡이츠", "COUPANGEATS"), C.DELIVERY, "🍜"),
    # Streaming and subscriptions
    _m("netflix", "넷플릭스", ("넷플릭스", "NETFLIX"), C.OTT, "🎬"),
    _m("youtube", "유튜브 프리미엄", ("유튜브", "YOUTUBE", "GOOGLE *YouTube"), C.OTT, "▶️"),
    _m("disney_plus", "디즈니플러스", ("디즈니플러스", "DISNEY+", "DISNEY PLUS"), C.OTT, "🐭"),
    _m("wavve", "웨이브", ("웨이브", "WAVVE"), C.OTT, "🌊"),
    _m("tving", "티빙", ("티빙", "TVING"), C.OTT, "📺"),
    _m("watcha", "왓챠", ("왓챠", "WATCHA"), C.OTT, "🎬"),
    _m("apple_tv", "Apple TV+", ("APPLE TV", "애플TV"), C.OTT, "🍎"),
    # Music
    _m("spotify", "스포티파이", ("스포티파이", "SPOTIFY"), C.MUSIC, "🎵"),
    _m("melon", "멜론", ("멜론", "MELON"), C.MUSIC, "🍈"),
    _m("genie", "지니뮤직", ("지니", "GENIE"), C.MUSIC, "🧞"),
    _m("flo", "플로", ("플로", "FLO"), C.MUSIC, "🎶"),
    _m("apple_music", "Apple Music", ("APPLE MUSIC", "애플뮤직"), C.MUSIC, "🍎"),
    _m("youtube_music", "유튜브뮤직", ("YOUTUBE MUSIC",), C.MUSIC, "🎵"),
    # Cafes
    _m("starbucks", "스타벅스", ("스타벅스", "STARBUCKS"), C.CAFE_SNACK, "☕"),
    _m("twosome", "투썸플레이스", ("투썸", "TWOSOME", "A TWOSOME"), C.CAFE_SNACK, "☕"),
    _m("ediya", "이디야", ("이디야", "EDIYA"), C.CAFE_SNACK, "☕"),
    _m("mega_coffee", "메가커피", ("메가", "MEGA", "메가커피"), C.CAFE_SNACK, "☕"),
    _m("compose", "컴포즈커피", ("컴포즈", "COMPOSE"), C.CAFE_SNACK, "☕"),
    _m("paik_coffee", "빽다방", ("빽다방", "PAIK"), C.CAFE_SNACK, "☕"),
    # Convenience stores
    _m("cu", "CU", ("CU", "씨유"), C.CAFE_SNACK, "🏪"),
    _m("gs25", "GS25", ("GS25", "지에스25"), C.CAFE_SNACK, "🏪"),
    _m("seveneleven", "세븐일레븐", ("세븐일레븐", "7ELEVEN"), C.CAFE_SNACK, "🏪"),
    _m("emart24", "이마트24", ("이마트24", "EMART24"), C.CAFE_SNACK, "🏪"),
    # Grocery
    _m("emart", "이마트", ("이마트", "EMART"), C.GROCERY, "🛒"),
    _m("homeplus", "홈플러스", ("홈플러스", "HOMEPLUS"), C.GROCERY, "🛒"),
    _m("lotte_mart", "롯데마트", ("롯데마트", "LOTTEMART"), C.GROCERY, "🛒"),
    _m("costco", "코스트코", ("코스트코", "COSTCO"), C.GROCERY, "🛒"),
    _m("traders", "트레이더스", ("트레이더스", "TRADERS"), C.GROCERY, "🛒"),
    # Fast food
    _m("mcdonalds", "맥도날드", ("맥도날드", "MCDONALD", "맥날"), C.DINING_OUT, "🍔"),
    _m("burgerking", "버거킹", ("버거킹", "BURGERKING"), C.DINING_OUT, "🍔"),
    _m("lotteria", "롯데리아", ("롯데리아", "LOTTERIA"), C.DINING_OUT, "🍔"),
    _m("kfc", "KFC", ("KFC", "케이에프씨"), C.DINING_OUT, "🍗"),
    _m("subway", "서브웨이", ("서브웨이", "SUBWAY"), C.DINING_OUT, "🥪"),
    _m("dominos", "도미노피자", ("도미노", "DOMINO"), C.DINING_OUT, "🍕"),
    _m("pizzahut", "피자헛", ("피자헛", "PIZZAHUT"), C.DINING_OUT, "🍕"),
    # Transport
    _m("kakao_taxi", "카카오택시", ("카카오택시", "KAKAOT"), C.TAXI, "🚕"),
    _m("uber", "우버", ("우버", "UBER"), C.TAXI, "🚕"),
    _m("tada", "타다", ("타다", "TADA"), C.TAXI, "🚕"),
    _m("korail", "코레일", ("코레일", "KORAIL", "KTX"), C.TRANSPORTATION, "🚄"),
    _m("srt", "SRT", ("SRT", "에스알티"), C.TRANSPORTATION, "🚄"),
    # Fuel
    _m("sk_energy", "SK에너지", ("SK에너지", "SK주유"), C.CAR, "⛽"),
    _m("gs_caltex", "GS칼텍스", ("GS칼텍스", "지에스칼텍스"), C.CAR, "⛽"),
    _m("hyundai_oilbank", "현대오일뱅크", ("현대오일뱅크", "오일뱅크"), C.CAR, "⛽"),
    _m("soil", "S-OIL", ("S-OIL", "에쓰오일"), C.CAR, "⛽"),
    # Games and app stores
    _m("google_play", "구글 플레이", ("GOOGLE PLAY", "구글 플레이"), C.GAME, "🎮"),
    _m("apple_appstore", "앱스토어", ("APPLE.COM", "앱스토어", "APP STORE"), C.GAME, "🍎"),
    _m("steam", "스팀", ("STEAM", "스팀"), C.GAME, "🎮"),
    _m("nexon", "넥슨", ("넥슨", "NEXON"), C.GAME, "🎮"),
    _m("nc", "엔씨소프트", ("엔씨", "NCSOFT"), C.GAME, "🎮"),
    # Fashion
    _m("musinsa", "무신사", ("무신사", "MUSINSA"), C.CLOTHING, "👕"),
    _m("zigzag", "지그재그", ("지그재그", "ZIGZAG"), C.CLOTHING, "👗"),
    _m("ably", "에이블리", ("에이블리", "ABLY"), C.CLOTHING, "👗"),
    _m("w_concept", "W컨셉", ("W컨셉", "WCONCEPT"), C.CLOTHING, "👗"),
    _m("uniqlo", "유니클로", ("유니클로", "UNIQLO"), C.CLOTHING, "👕"),
    _m("zara", "자라", ("자라", "ZARA"), C.CLOTHING, "👗"),
    _m("hm", "H&M", ("H&M", "에이치앤엠"), C.CLOTHING, "👕"),
    _m("nike", "나이키", ("나이키", "NIKE"), C.SHOES_BAG, "👟"),
    _m("adidas", "아디다스", ("아디다스", "ADIDAS"), C.SHOES_BAG, "👟"),
    # Beauty
    _m("olive_young", "올리브영", ("올리브영", "OLIVEYOUNG"), C.BEAUTY, "💄"),
    _m("lalavla", "랄라블라", ("랄라블라", "LALAVLA"), C.BEAUTY, "💄"),
    _m("aritaum", "아리따움", ("아리따움", "ARITAUM"), C.BEAUTY, "💄"),
    # Telecom
    _m("skt", "SKT", ("SK텔레콤", "SKT"), C.INTERNET_PHONE, "📱"),
    _m("kt", "KT", ("KT통신", "KT요금", "케이티"), C.INTERNET_PHONE, "📱"),
    _m("lgu", "LG U+", ("LG U+", "유플러스", "LGU"), C.INTERNET_PHONE, "📱"),
    # Books and education
    _m("yes24", "예스24", ("예스24", "YES24"), C.BOOK, "📚"),
    _m("kyobo", "교보문고", ("교보문고", "KYOBO"), C.BOOK, "📚"),
    _m("aladin", "알라딘", ("알라딘", "ALADIN"), C.BOOK, "📚"),
    _m("class101", "클래스101", ("클래스101", "CLASS101"), C.ONLINE_COURSE, "💻"),
    _m("fastcampus", "패스트캠퍼스", ("패스트캠퍼스", "FASTCAMPUS"), C.ONLINE_COURSE, "💻"),
    # Payment services
    _m("kakaopay", "카카오페이", ("카카오페이", "KAKAOPAY"), C.TRANSFER, "💳"),
    _m("toss", "토스", ("토스", "TOSS"), C.TRANSFER, "💳"),
    _m("payco", "페이코", ("페이코", "PAYCO"), C.TRANSFER, "💳"),
    # Fallback
    _m(OTHER_MERCHANT_ID, "기타", (), C.OTHER, "💰"),
)
