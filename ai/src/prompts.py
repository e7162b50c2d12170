from google.genai import types

# --- Prompts ---

ANALYZE_PROMPT = (
    "이 사진 속 연예인의 착장 정보(브랜드, 예상 가격)와 비슷한 스타일의 "
    "5만원 이하 가성비 아이템을 추천해줘. 반드시 한국어로 답변해줘."
)

COMPARISON_PROMPT = """
당신은 K-패션 인스타그램 계정을 운영하는 AI 스타일리스트입니다.
이미지 속 연예인의 착장을 분석해 아래 JSON 형식으로만 답변하세요.
설명 문장은 절대 쓰지 말고, 반드시 JSON만 반환하세요.

1단계: 연예인 착장 분석
- 상의(top), 하의(bottom), 액세서리(accessory)를 중심으로 아이템을 나눕니다.
- 각 아이템에 대해 아래 정보를 만듭니다:
  - part: "top" | "bottom" | "accessory"
  - brand: 브랜드명 (모르면 "알 수 없음")
  - productName: 제품명 또는 간단한 설명
  - price: 예상 가격 (원 단위, 쉼표 포함된 문자열 예: "350,000")
  - styleKeywords: ["오버핏", "스트릿", "미니멀"] 처럼 2~4개의 스타일 키워드

2단계: 가성비 추천템 생성 (5만원 이하)
- 각 연예인 아이템마다 유사한 스타일의 가성비 대체템을 1개씩 만듭니다.
- 가성비 아이템은 아래 정보를 가집니다:
  - part: "top" | "bottom" | "accessory"
  - brand: 실제일 필요는 없지만 그럴듯한 브랜드명
  - productName: 제품명
  - price: "49,000" 이하의 문자열 (예: "39,000")
  - styleKeywords: 연예인 착장과 비슷한 키워드 2~4개
  - similarityScore: 0~100 사이 숫자 (유사도)

3단계: 가격 요약 및 캡션
- 모든 연예인 아이템 가격을 합산한 totalCelebPrice (숫자, 원 단위)
- 모든 가성비 아이템 가격을 합산한 totalBudgetPrice (숫자, 원 단위)
- savingAmount = totalCelebPrice - totalBudgetPrice (숫자)
- savingText: 예) "총 1,420,000원 절약!"
- captionTitle: 예) "제니 손민수템 찾았다! 150만원짜리 셔츠 3만원에 사는 법"
- captionHashtags: 한국어 해시태그 5~10개 배열 (예: ["#제니룩", "#가성비템", "#손민수", "#OOTD", "#공항패션"])

반환 형식(JSON):
{
  "celebrityItems": [
    {"id": "top-1", "part": "top", "brand": "브랜드명", "productName": "제품명",
     "price": "350,000", "styleKeywords": ["키워드1", "키워드2"]}
  ],
  "budgetItems": [
    {"id": "budget-top-1", "part": "top", "brand": "브랜드명", "productName": "가성비 제품명",
     "price": "39,000", "styleKeywords": ["키워드1", "키워드2"], "similarityScore": 92}
  ],
  "totalCelebPrice": 1500000,
  "totalBudgetPrice": 120000,
  "savingAmount": 1380000,
  "savingText": "총 1,380,000원 절약!",
  "captionTitle": "제니 손민수템 찾았다! 150만원짜리 셔츠 3만원에 사는 법",
  "captionHashtags": ["#제니룩", "#가성비템", "#손민수", "#OOTD", "#공항패션"]
}
""".strip()

PING_PROMPT = "test"

# --- Schema Definitions ---

PARTS = ["top", "bottom", "accessory"]

# A single item worn by the celebrity
celebrity_item_schema = types.Schema(
    type=types.Type.OBJECT,
    properties={
        "id": types.Schema(type=types.Type.STRING, description="Stable item id (e.g. 'top-1')."),
        "part": types.Schema(type=types.Type.STRING, enum=PARTS, description="Body part the item belongs to."),
        "brand": types.Schema(type=types.Type.STRING, description="Brand name, '알 수 없음' if unknown."),
        "productName": types.Schema(type=types.Type.STRING, description="Product name or short description."),
        "price": types.Schema(type=types.Type.STRING, description="Estimated price in KRW with thousands separators (e.g. '350,000')."),
        "styleKeywords": types.Schema(type=types.Type.ARRAY, items=types.Schema(type=types.Type.STRING), description="2 to 4 style keywords."),
    },
    required=["part", "brand", "productName", "price"]
)

# The budget alternative generated for one celebrity item
budget_item_schema = types.Schema(
    type=types.Type.OBJECT,
    properties={
        "id": types.Schema(type=types.Type.STRING, description="Stable item id (e.g. 'budget-top-1')."),
        "part": types.Schema(type=types.Type.STRING, enum=PARTS),
        "brand": types.Schema(type=types.Type.STRING, description="Plausible brand name."),
        "productName": types.Schema(type=types.Type.STRING),
        "price": types.Schema(type=types.Type.STRING, description="Price in KRW, at most '49,000'."),
        "styleKeywords": types.Schema(type=types.Type.ARRAY, items=types.Schema(type=types.Type.STRING)),
        "similarityScore": types.Schema(type=types.Type.NUMBER, description="Similarity with the celebrity item, 0 to 100."),
    },
    required=["part", "brand", "productName", "price"]
)

comparison_schema = types.Schema(
    type=types.Type.OBJECT,
    properties={
        "celebrityItems": types.Schema(type=types.Type.ARRAY, items=celebrity_item_schema),
        "budgetItems": types.Schema(type=types.Type.ARRAY, items=budget_item_schema),
        "totalCelebPrice": types.Schema(type=types.Type.NUMBER, description="Sum of celebrity item prices (KRW)."),
        "totalBudgetPrice": types.Schema(type=types.Type.NUMBER, description="Sum of budget item prices (KRW)."),
        "savingAmount": types.Schema(type=types.Type.NUMBER, description="totalCelebPrice - totalBudgetPrice."),
        "savingText": types.Schema(type=types.Type.STRING),
        "captionTitle": types.Schema(type=types.Type.STRING),
        "captionHashtags": types.Schema(type=types.Type.ARRAY, items=types.Schema(type=types.Type.STRING), description="5 to 10 Korean hashtags."),
    },
    required=["celebrityItems", "budgetItems"]
)
