"""Domain option lists shared by schemas, services and the master-data API."""
from __future__ import annotations

EMPLOYEE_ROLES = ("admin", "employee")
EMPLOYEE_STATUSES = ("PENDING", "WORKING", "RESIGNED")
CUSTOMER_TYPES = ("CUSTOMER", "LEAD")
PAYMENT_ACCOUNT_TYPES = ("COMPANY", "PERSONAL")

ORDER_TYPE_NEW = "Làm mới"
ORDER_TYPE_WARRANTY = "Bảo hành"
ORDER_TYPES = (ORDER_TYPE_NEW, ORDER_TYPE_WARRANTY)

# note_type tells the form which input collects `source_notes`:
# an employee id, a customer id, free text, or nothing.
CUSTOMER_SOURCES = (
    {"value": "employee_referral", "label": "Nhân viên giới thiệu", "note_type": "employee_search"},
    {"value": "customer_referral", "label": "Khách cũ giới thiệu", "note_type": "customer_search"},
    {"value": "acquaintance_referral", "label": "Người quen giới thiệu", "note_type": "text_input_optional"},
    {"value": "facebook", "label": "Facebook", "note_type": "text_input_optional"},
    {"value": "zalo", "label": "Zalo", "note_type": "text_input_optional"},
    {"value": "tiktok", "label": "Tiktok", "note_type": "text_input_optional"},
    {"value": "youtube", "label": "Youtube", "note_type": "text_input_optional"},
    {"value": "google_search", "label": "Tìm kiếm Google", "note_type": "none"},
    {"value": "google_maps", "label": "Google Maps", "note_type": "none"},
    {"value": "website", "label": "Website", "note_type": "none"},
    {"value": "voucher", "label": "Voucher / Tờ rơi", "note_type": "text_input_optional"},
    {"value": "event", "label": "Sự kiện / Hội thảo", "note_type": "text_input_optional"},
    {"value": "walk_in", "label": "Khách vãng lai", "note_type": "none"},
    {"value": "hismile", "label": "Hismile", "note_type": "text_input_optional"},
    {"value": "other", "label": "Nguồn khác", "note_type": "text_input_required"},
)
CUSTOMER_SOURCE_VALUES = tuple(s["value"] for s in CUSTOMER_SOURCES)
SOURCE_NOTE_TYPES = {s["value"]: s["note_type"] for s in CUSTOMER_SOURCES}

SERVICES_OF_INTEREST = (
    {"value": "implant", "label": "Implant"},
    {"value": "rang_su", "label": "Răng sứ"},
    {"value": "nieng_rang", "label": "Niềng răng"},
    {"value": "mat_luoi", "label": "Mặt lưỡi"},
    {"value": "invisalign", "label": "Invisalign"},
    {"value": "tay_trang_rang", "label": "Tẩy trắng răng"},
    {"value": "nho_rang_khon", "label": "Nhổ răng khôn"},
    {"value": "cuoi_ho_loi", "label": "Cười hở lợi"},
    {"value": "tong_quat", "label": "Tổng quát"},
)
SERVICE_OF_INTEREST_VALUES = tuple(s["value"] for s in SERVICES_OF_INTEREST)

PRIMARY_CONTACT_ROLES = (
    {"value": "bo", "label": "Bố"},
    {"value": "me", "label": "Mẹ"},
    {"value": "con", "label": "Con"},
    {"value": "vo", "label": "Vợ"},
    {"value": "chong", "label": "Chồng"},
    {"value": "anh_em_trai", "label": "Anh/Em trai"},
    {"value": "chi_em_gai", "label": "Chị/Em gái"},
    {"value": "ong", "label": "Ông"},
    {"value": "ba", "label": "Bà"},
    {"value": "chau", "label": "Cháu"},
    {"value": "ban", "label": "Bạn"},
)
PRIMARY_CONTACT_ROLE_VALUES = tuple(r["value"] for r in PRIMARY_CONTACT_ROLES)

GENDERS = ("male", "female")

# Clinic code fragments with a fixed customer-code prefix.
CLINIC_CODE_PREFIXES = (("450", "MK"), ("143", "TDT"), ("153", "DN"))

__all__ = [
    "EMPLOYEE_ROLES",
    "EMPLOYEE_STATUSES",
    "CUSTOMER_TYPES",
    "PAYMENT_ACCOUNT_TYPES",
    "ORDER_TYPE_NEW",
    "ORDER_TYPE_WARRANTY",
    "ORDER_TYPES",
    "CUSTOMER_SOURCES",
    "CUSTOMER_SOURCE_VALUES",
    "SOURCE_NOTE_TYPES",
    "SERVICES_OF_INTEREST",
    "SERVICE_OF_INTEREST_VALUES",
    "PRIMARY_CONTACT_ROLES",
    "PRIMARY_CONTACT_ROLE_VALUES",
    "GENDERS",
    "CLINIC_CODE_PREFIXES",
]
