"""
CSS selectors for ledenicheur.fr.

The site ships styled-components class names with build hashes
(``PropertyName-sc-...``), so class matches are substring matches and every
field keeps a list of alternatives, most specific first.
"""

# ============================================================================
# SEARCH RESULTS
# ============================================================================

SEARCH_RESULT_LIST = 'ul[data-test="SearchResultList"]'
SEARCH_RESULT_ITEM = "li"
SEARCH_CARD = 'div[data-test="ProductGridCard"]'
SEARCH_CARD_LINKS = [
    'a[data-test="ProductCardProductName"]',
    'a[href*="/product"]',
    "a[href]",
]
SEARCH_CARD_TITLES = [
    'a[data-test="ProductCardProductName"] > p.font-heavy',
    'a[data-test="ProductCardProductName"] p',
    "h3",
]
SEARCH_CARD_PRICE = 'div[data-sentry-component="Price"] p'
SEARCH_CARD_IMAGE = 'div[data-sentry-component="DynamicImage"] img'

# ============================================================================
# PRODUCT PAGE: "Info produit"
# ============================================================================

PRODUCT_INFO_WRAPPERS = [
    'section[data-test="PropertiesTabContent"]',
    "div#properties",
    'div[class*="SectionWrapper"]',
]
PRODUCT_INFO_TITLES = ["h2.h2text", "h2"]

SPECIFICATION_ROOTS = [
    'div[data-test-type="product-info"]',
    'section[data-test="PropertiesTabContent"]',
    "div#properties",
]
SPECIFICATION_SECTION = 'section[role="list"]'
SPECIFICATION_SECTION_TITLE = "h3"
# "Informations de base" wraps its section together with its heading
SPECIFICATION_SECTION_WRAPPER = 'div[data-test="BasicInfo"]'
SPECIFICATION_ROW = 'div[role="listitem"]'

SPECIFICATION_KEY_COLUMN = ':scope > div[class*="Column"]:first-child'
SPECIFICATION_VALUE_COLUMN = ':scope > div[class*="Column"]:nth-child(2)'
SPECIFICATION_KEY_TEXT = 'span[class*="PropertyName"]'
SPECIFICATION_VALUE_SIMPLE = 'span[class*="PropertyValue"]'
SPECIFICATION_VALUE_LINKS = ['a[data-test="InternalLink"]', "a"]
SPECIFICATION_VALUE_ICON_TEXT = 'span[class*="ColoredIconWrapper"] span'

PAGE_TITLE = "h1"

# ============================================================================
# PRODUCT PAGE: images
# ============================================================================

MEDIA_BUTTONS = [
    'button[data-test="ProductMedia"]',
    'div[data-test="ProductMedia"] button',
    'button[aria-label*="image" i]',
    'button[aria-label*="photo" i]',
]
LIGHTBOX_CONTAINERS = [
    'div[class*="Lightbox"]',
    'div[data-test="Carousel"]',
    'div[class*="CarouselWrapper"]',
]
LIGHTBOX_IMAGES = [
    'div[class*="CarouselSlide"] img',
    "div[data-index] img",
    'div[class*="Slide"] img',
]
LIGHTBOX_CLOSE_BUTTONS = [
    'button[aria-label="Close lightbox"]',
    'button[aria-label*="close" i]',
    'button[aria-label*="fermer" i]',
    'button[class*="close"]',
]
CAROUSEL_CONTAINERS = [
    'div[data-test="Carousel"]',
    'div[class*="CarouselWrapper"]',
    'div[class*="Carousel"]',
    "div.react-swipe-container",
]
THUMBNAIL_IMAGES = [
    'ul[class*="List"] li img',
    'img[src*="/280/"]',
    'img[src*="thumbnail"]',
]
MODAL_OVERLAY = "div.ReactModal__Overlay--after-open"

# ============================================================================
# PRODUCT PAGE: price history ("Statistiques")
# ============================================================================

STATISTICS_TABS = [
    'button:has-text("Statistiques")',
    'button:has-text("Historique des prix")',
    'a:has-text("Statistiques")',
    'a:has-text("Historique des prix")',
    '[role="tab"]:has-text("Statistiques")',
    '[role="tab"]:has-text("Historique")',
    'button[data-test*="statistics" i]',
    'button[aria-label*="statistique" i]',
]
PRICE_HISTORY_PANELS = [
    'section[data-test="StatisticsTabContent"]',
    '[data-test*="price-history" i]',
    'section:has(h2:has-text("Historique des prix"))',
    'div:has(> h2:has-text("Historique des prix"))',
    'section:has(div[class*="StyledFooter"])',
    'div:has(> div[class*="StyledFooterItem"])',
]

PERIOD_LABEL = "3 mois"
PERIOD_BUTTONS = [
    f'div[class*="StyledButtonGroup"] button:has(span[title="{PERIOD_LABEL}"])',
    f'button:has-text("{PERIOD_LABEL}")',
    'div[class*="StyledButtonGroup"] button:first-child',
]
# styled-components class carried by the active period button
ACTIVE_PERIOD_CLASS = "BHEBV"

# first footer item, unless it is the only one or carries today's price
PERIOD_FOOTER_ITEM = (
    'div[class*="StyledFooterItem"]:first-child:not(:last-child)'
    ':not(:has([data-testid="price-history-lowest-price-today"]))'
)
LOWEST_PRICE_IN_PERIOD = [
    'h3[data-testid="price-history-lowest-price-in-time-range"]',
    '[data-testid="price-history-lowest-price-in-time-range"]',
    f"{PERIOD_FOOTER_ITEM} h3",
]
LOWEST_PRICE_DATE = [
    f"{PERIOD_FOOTER_ITEM} span.captiontext",
    f"{PERIOD_FOOTER_ITEM} span:last-child",
]
LOWEST_PRICE_TODAY = [
    'h3[data-testid="price-history-lowest-price-today"]',
    '[data-testid="price-history-lowest-price-today"]',
    'div[class*="StyledFooterItem"]:nth-child(2) h3',
    'div[class*="StyledFooterItem"]:last-child h3',
    '[data-testid="price-history-price-today-indicator"]',
]
LOWEST_PRICE_TODAY_SHOP = [
    'div[class*="StyledFooterItem"]:nth-child(2) a span',
    'div[class*="StyledFooterItem"]:last-child a span',
    'a[href*="go-to-shop"] span',
]

# ============================================================================
# COOKIE CONSENT
# ============================================================================

CONSENT_WRAPPER = "div.cmp-wrapper"
CONSENT_WRAPPER_ACCEPT = "button#accept"
CONSENT_BUTTONS = [
    'button[data-test="CookieBannerAcceptButton"]',
    "button#cmpbntyestxt",
    'button[data-test="cookie-accept-all"]',
    "button#onetrust-accept-btn-handler",
    'button:has-text("Tout accepter")',
    'button:has-text("Accepter")',
    "button:has-text(\"J'accepte\")",
]
CONSENT_VENDOR_BUTTON = (
    'div#usercentrics-root button[data-testid="uc-accept-all-button"]'
)
CONSENT_FRAMES = [
    'iframe[id^="sp_message_iframe"]',
    'iframe[title*="consent" i]',
    'iframe[src*="consent"]',
]
CONSENT_FRAME_BUTTONS = [
    'button[title="Tout accepter"]',
    'button[title="Accept all"]',
    'button:has-text("Tout accepter")',
    'button:has-text("Accepter")',
]

# ============================================================================
# BOT CHALLENGES
# ============================================================================

BOT_CHALLENGE_MARKERS = {
    "captcha-form": ['form[action*="captcha" i]'],
    "recaptcha": [".g-recaptcha", 'iframe[title*="recaptcha challenge" i]'],
    "hcaptcha": [".h-captcha", 'iframe[src*="hcaptcha"]'],
    "turnstile": [".cf-turnstile", "#challenge-form",
                  'iframe[src*="challenges.cloudflare"]'],
    "datadome": ['iframe[src*="captcha-delivery.com"]'],
}
