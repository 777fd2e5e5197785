"""User-facing strings for the supported languages."""
from __future__ import annotations

from typing import Dict

UI_STRINGS: Dict[str, Dict[str, str]] = {
    "en": {
        "quotationTitle": "Quotation",
        "invoiceTitle": "Invoice",
        "copySuffix": "(Copy)",
        "deleteConfirm": "Are you sure you want to delete this document?",
        "pdfError": "Failed to generate PDF. Please try again.",
        "client": "Client",
        "date": "Date",
        "issueDate": "Issue Date",
        "expiryDate": "Valid Until",
        "dueDate": "Due Date",
        "description": "Description",
        "qty": "Qty",
        "unitPrice": "Unit Price",
        "discount": "Discount",
        "totalHeader": "Total",
        "subtotal": "Subtotal",
        "tax": "Tax",
        "grandTotal": "Total",
        "terms": "Terms & Conditions",
        "notes": "Notes",
        "status_Draft": "Draft",
        "status_Finalized": "Finalized",
        "status_Won": "Won",
        "status_Lost": "Lost",
        "emailGreeting": "Dear {client},",
        "emailIntro": "Please check the attached {title} ({number}) details below.",
        "emailDocNo": "Document No",
        "emailTotal": "Total Amount",
        "emailClosing": "If you have any questions, please reply to this email.",
        "emailRegards": "Best regards,",
        "companyIdentity": "Identity",
        "regNo": "Reg No",
        "bankInfo": "Bank",
        "signature": "Signature",
    },
    "ko": {
        "quotationTitle": "견적서",
        "invoiceTitle": "청구서",
        "copySuffix": "(사본)",
        "deleteConfirm": "이 문서를 삭제하시겠습니까?",
        "pdfError": "PDF 생성에 실패했습니다. 다시 시도해 주세요.",
        "client": "고객사",
        "date": "날짜",
        "issueDate": "발행일",
        "expiryDate": "유효기간",
        "dueDate": "지불기한",
        "description": "품목",
        "qty": "수량",
        "unitPrice": "단가",
        "discount": "할인",
        "totalHeader": "금액",
        "subtotal": "공급가액",
        "tax": "세액",
        "grandTotal": "합계",
        "terms": "거래 조건",
        "notes": "비고",
        "status_Draft": "작성 중",
        "status_Finalized": "발행 완료",
        "status_Won": "수주",
        "status_Lost": "실주",
        "emailGreeting": "{client} 담당자님께,",
        "emailIntro": "첨부된 {title} ({number}) 내용을 아래와 같이 안내드립니다.",
        "emailDocNo": "문서 번호",
        "emailTotal": "합계 금액",
        "emailClosing": "문의 사항이 있으시면 회신 부탁드립니다.",
        "emailRegards": "감사합니다.",
        "companyIdentity": "사업자 정보",
        "regNo": "사업자등록번호",
        "bankInfo": "계좌",
        "signature": "서명 (인)",
    },
}


def strings_for(language: str) -> Dict[str, str]:
    return UI_STRINGS.get(language) or UI_STRINGS["en"]


def lookup(language: str, key: str) -> str:
    """Localized string, falling back to English and then to the key itself."""
    table = strings_for(language)
    return table.get(key) or UI_STRINGS["en"].get(key, key)
