"""Default bank and card issuer configs."""

from banknoti.models import DEFAULT_AMOUNT_REGEX, BankConfig

KAKAOTALK = "com.kakao.talk"

BANK_INCOME_KEYWORDS = ("입금", "받으셨", "들어옴", "이체받음", "송금받음", "출금취소")
BANK_EXPENSE_KEYWORDS = (
    "출금", "결제", "이체", "송금", "사용", "승인", "지출", "체크카드출금", "신용카드출금",
)

CARD_INCOME_KEYWORDS = ("취소", "환불")
CARD_EXPENSE_KEYWORDS = ("승인", "결제", "사용", "일시불", "할부")


def _bank(bank_id: str, display_name: str, *packages: str) -> BankConfig:
    return BankConfig(
        bank_id=bank_id,
        display_name=display_name,
        package_names=packages,
        income_keywords=BANK_INCOME_KEYWORDS,
        expense_keywords=BANK_EXPENSE_KEYWORDS,
        amount_regex=DEFAULT_AMOUNT_REGEX,
    )


def _card(bank_id: str, display_name: str, *packages: str) -> BankConfig:
    return BankConfig(
        bank_id=bank_id,
        display_name=display_name,
        package_names=packages,
        income_keywords=CARD_INCOME_KEYWORDS,
        expense_keywords=CARD_EXPENSE_KEYWORDS,
        amount_regex=DEFAULT_AMOUNT_REGEX,
    )


# Banks come before card issuers: a package shared by both resolves to the bank first.
DEFAULT_BANKS: tuple[BankConfig, ...] = (
    _bank(
        "kb_kookmin", "KB국민",
        "com.kbstar.kbbank", "com.kbcard.kbkookmincard", "com.kbstar.liivbank", KAKAOTALK,
    ),
    _bank("shinhan", "신한", "com.shinhan.sbanking", "com.shcard.smartpay", KAKAOTALK),
    _bank("kakaobank", "카카오뱅크", "com.kakaobank.channel", KAKAOTALK),
    _bank("woori", "우리", "com.wooribank.smart.npib", "com.wooricard.smartapp", KAKAOTALK),
    _bank(
        "hana", "하나",
        "com.hanabank.ebk.channel.android.hananbank", "com.hanaskcard.rocomo.potal", KAKAOTALK,
    ),
    _bank("nh", "NH농협", "nh.smart.banking", "com.nhncardsmartapp", KAKAOTALK),
    _bank("ibk", "IBK기업", "com.ibk.android.ionebank", KAKAOTALK),
    BankConfig(
        bank_id="toss",
        display_name="토스",
        package_names=("viva.republica.toss",),
        income_keywords=BANK_INCOME_KEYWORDS + ("받았어요",),
        expense_keywords=BANK_EXPENSE_KEYWORDS + ("보냈어요",),
        amount_regex=DEFAULT_AMOUNT_REGEX,
    ),
    _card("samsung_card", "삼성카드", "kr.co.samsungcard.mpocket", KAKAOTALK),
    _card("hyundai_card", "현대카드", "com.hyundaicard.appcard", KAKAOTALK),
    _card("lotte_card", "롯데카드", "com.lcacApp", "com.lottemembers.android", KAKAOTALK),
    _card("bc_card", "BC카드", "com.bccard.bcpayapp", KAKAOTALK),
    _card(
        "shinhan_card", "신한카드",
        "com.shcard.smartpay", "com.shinhancardsmartpayplus", KAKAOTALK,
    ),
    _card("kb_card", "KB국민카드", "com.kbcard.kbkookmincard", "com.kbcard.cxh.appcard", KAKAOTALK),
    _card("hana_card", "하나카드", "com.hanaskcard.rocomo.potal", KAKAOTALK),
    _card("woori_card", "우리카드", "com.wooricard.smartapp", "com.wooricard.wpay", KAKAOTALK),
    _card("nh_card", "NH농협카드", "com.nhncardsmartapp", KAKAOTALK),
)
