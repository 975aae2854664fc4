from storefront_banners.models.announcement import (
    GLOBAL_PAGE_PATTERN,
    Announcement,
    AnnouncementCreate,
    AnnouncementPagePattern,
    AnnouncementRead,
    AnnouncementSize,
    AnnouncementStatusUpdate,
    AnnouncementText,
    AnnouncementTextData,
    AnnouncementType,
    AnnouncementUpdate,
    BannerBackground,
    BannerBackgroundData,
    BannerFormField,
    BannerFormFieldData,
    CallToAction,
    CallToActionData,
    CloseButtonPosition,
    EndType,
    PagePattern,
    StartType,
)

__all__ = [
    "GLOBAL_PAGE_PATTERN",
    "Announcement",
    "AnnouncementCreate",
    "AnnouncementUpdate",
    "AnnouncementRead",
    "AnnouncementStatusUpdate",
    "AnnouncementType",
    "AnnouncementSize",
    "StartType",
    "EndType",
    "CloseButtonPosition",
    "AnnouncementText",
    "AnnouncementTextData",
    "CallToAction",
    "CallToActionData",
    "BannerBackground",
    "BannerBackgroundData",
    "BannerFormField",
    "BannerFormFieldData",
    "PagePattern",
    "AnnouncementPagePattern",
]
