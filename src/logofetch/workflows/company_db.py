"""Curated company -> domain database.

Read-only and process-wide. Insertion order is the iteration order used by the
resolver, so fuzzy-match ties and search ties are reproducible: reorder entries
only on purpose.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Tuple

from .logo_utils import normalize_name


@dataclass(frozen=True, slots=True)
class CompanyEntry:
    domain: str
    aliases: Tuple[str, ...]
    category: str


_COMPANIES = {
    # E-Commerce & Retail
    "shopify": CompanyEntry("shopify.com", ("shopify plus",), "E-Commerce"),
    "woocommerce": CompanyEntry("woocommerce.com", ("woo commerce", "woo"), "E-Commerce"),
    "bigcommerce": CompanyEntry("bigcommerce.com", ("big commerce",), "E-Commerce"),
    "magento": CompanyEntry("magento.com", ("adobe commerce",), "E-Commerce"),
    "squarespace": CompanyEntry("squarespace.com", ("square space",), "E-Commerce"),
    "wix": CompanyEntry("wix.com", (), "E-Commerce"),
    "etsy": CompanyEntry("etsy.com", (), "E-Commerce"),
    "amazon": CompanyEntry("amazon.com", ("aws marketplace",), "E-Commerce"),
    "ebay": CompanyEntry("ebay.com", (), "E-Commerce"),
    "prestashop": CompanyEntry("prestashop.com", ("presta shop",), "E-Commerce"),
    "volusion": CompanyEntry("volusion.com", (), "E-Commerce"),
    "flipkart": CompanyEntry("flipkart.com", (), "E-Commerce"),

    # CRM & Marketing
    "hubspot": CompanyEntry("hubspot.com", ("hub spot", "hs"), "CRM"),
    "salesforce": CompanyEntry("salesforce.com", ("sfdc", "sf"), "CRM"),
    "mailchimp": CompanyEntry("mailchimp.com", ("mail chimp",), "Marketing"),
    "marketo": CompanyEntry("marketo.com", (), "Marketing"),
    "activecampaign": CompanyEntry("activecampaign.com", ("active campaign",), "Marketing"),
    "constantcontact": CompanyEntry("constantcontact.com", ("constant contact",), "Marketing"),
    "sendinblue": CompanyEntry("brevo.com", ("brevo",), "Marketing"),
    "klaviyo": CompanyEntry("klaviyo.com", (), "Marketing"),
    "intercom": CompanyEntry("intercom.com", (), "CRM"),
    "zendesk": CompanyEntry("zendesk.com", (), "CRM"),
    "freshdesk": CompanyEntry("freshdesk.com", (), "CRM"),
    "pipedrive": CompanyEntry("pipedrive.com", ("pipe drive",), "CRM"),
    "zoho": CompanyEntry("zoho.com", (), "CRM"),
    "drift": CompanyEntry("drift.com", (), "CRM"),
    "freshsales": CompanyEntry("freshworks.com", ("fresh sales", "freshworks"), "CRM"),

    # Cloud & Infrastructure
    "aws": CompanyEntry("aws.amazon.com", ("amazon web services",), "Cloud"),
    "gcp": CompanyEntry("cloud.google.com", ("google cloud", "google cloud platform"), "Cloud"),
    "azure": CompanyEntry("azure.microsoft.com", ("microsoft azure",), "Cloud"),
    "digitalocean": CompanyEntry("digitalocean.com", ("digital ocean", "do"), "Cloud"),
    "heroku": CompanyEntry("heroku.com", (), "Cloud"),
    "vercel": CompanyEntry("vercel.com", ("zeit",), "Cloud"),
    "netlify": CompanyEntry("netlify.com", (), "Cloud"),
    "cloudflare": CompanyEntry("cloudflare.com", ("cloud flare", "cf"), "Cloud"),
    "linode": CompanyEntry("linode.com", ("akamai",), "Cloud"),
    "render": CompanyEntry("render.com", (), "Cloud"),
    "railway": CompanyEntry("railway.app", (), "Cloud"),
    "supabase": CompanyEntry("supabase.com", (), "Cloud"),
    "firebase": CompanyEntry("firebase.google.com", (), "Cloud"),
    "planetscale": CompanyEntry("planetscale.com", ("planet scale",), "Cloud"),
    "neon": CompanyEntry("neon.tech", (), "Cloud"),

    # Developer Tools
    "github": CompanyEntry("github.com", ("gh",), "DevTools"),
    "gitlab": CompanyEntry("gitlab.com", ("gl",), "DevTools"),
    "bitbucket": CompanyEntry("bitbucket.org", ("bit bucket", "bb"), "DevTools"),
    "jira": CompanyEntry("atlassian.com", (), "DevTools"),
    "atlassian": CompanyEntry("atlassian.com", (), "DevTools"),
    "confluence": CompanyEntry("atlassian.com/software/confluence", (), "DevTools"),
    "docker": CompanyEntry("docker.com", (), "DevTools"),
    "kubernetes": CompanyEntry("kubernetes.io", ("k8s",), "DevTools"),
    "jenkins": CompanyEntry("jenkins.io", (), "DevTools"),
    "circleci": CompanyEntry("circleci.com", ("circle ci",), "DevTools"),
    "travisci": CompanyEntry("travis-ci.com", ("travis ci", "travis"), "DevTools"),
    "sentry": CompanyEntry("sentry.io", (), "DevTools"),
    "datadog": CompanyEntry("datadoghq.com", ("data dog",), "DevTools"),
    "newrelic": CompanyEntry("newrelic.com", ("new relic",), "DevTools"),
    "postman": CompanyEntry("postman.com", (), "DevTools"),
    "insomnia": CompanyEntry("insomnia.rest", (), "DevTools"),
    "terraform": CompanyEntry("terraform.io", ("tf",), "DevTools"),
    "hashicorp": CompanyEntry("hashicorp.com", (), "DevTools"),
    "grafana": CompanyEntry("grafana.com", (), "DevTools"),
    "prometheus": CompanyEntry("prometheus.io", (), "DevTools"),
    "elasticsearch": CompanyEntry("elastic.co", ("elastic", "elk"), "DevTools"),
    "kibana": CompanyEntry("elastic.co/kibana", (), "DevTools"),
    "redis": CompanyEntry("redis.io", (), "DevTools"),
    "mongodb": CompanyEntry("mongodb.com", ("mongo",), "DevTools"),
    "postgresql": CompanyEntry("postgresql.org", ("postgres", "pg"), "DevTools"),
    "mysql": CompanyEntry("mysql.com", (), "DevTools"),
    "sqlite": CompanyEntry("sqlite.org", (), "DevTools"),
    "npm": CompanyEntry("npmjs.com", (), "DevTools"),
    "yarn": CompanyEntry("yarnpkg.com", (), "DevTools"),
    "webpack": CompanyEntry("webpack.js.org", (), "DevTools"),
    "vite": CompanyEntry("vitejs.dev", ("vitejs",), "DevTools"),
    "eslint": CompanyEntry("eslint.org", (), "DevTools"),
    "prettier": CompanyEntry("prettier.io", (), "DevTools"),

    # Payments
    "stripe": CompanyEntry("stripe.com", (), "Payments"),
    "paypal": CompanyEntry("paypal.com", ("pay pal",), "Payments"),
    "square": CompanyEntry("squareup.com", ("squareup",), "Payments"),
    "braintree": CompanyEntry("braintreepayments.com", ("brain tree",), "Payments"),
    "adyen": CompanyEntry("adyen.com", (), "Payments"),
    "klarna": CompanyEntry("klarna.com", (), "Payments"),
    "afterpay": CompanyEntry("afterpay.com", ("after pay",), "Payments"),
    "razorpay": CompanyEntry("razorpay.com", ("razor pay",), "Payments"),
    "plaid": CompanyEntry("plaid.com", (), "Payments"),
    "wise": CompanyEntry("wise.com", ("transferwise",), "Payments"),

    # Communication & Collaboration
    "slack": CompanyEntry("slack.com", (), "Communication"),
    "discord": CompanyEntry("discord.com", (), "Communication"),
    "teams": CompanyEntry("microsoft.com/en-us/microsoft-teams", ("microsoft teams", "ms teams"), "Communication"),
    "zoom": CompanyEntry("zoom.us", (), "Communication"),
    "telegram": CompanyEntry("telegram.org", ("tg",), "Communication"),
    "whatsapp": CompanyEntry("whatsapp.com", ("what's app", "wa"), "Communication"),
    "twilio": CompanyEntry("twilio.com", (), "Communication"),
    "sendgrid": CompanyEntry("sendgrid.com", ("send grid",), "Communication"),
    "mailgun": CompanyEntry("mailgun.com", ("mail gun",), "Communication"),
    "notion": CompanyEntry("notion.so", (), "Collaboration"),
    "airtable": CompanyEntry("airtable.com", ("air table",), "Collaboration"),
    "asana": CompanyEntry("asana.com", (), "Collaboration"),
    "trello": CompanyEntry("trello.com", (), "Collaboration"),
    "monday": CompanyEntry("monday.com", ("monday.com",), "Collaboration"),
    "clickup": CompanyEntry("clickup.com", ("click up",), "Collaboration"),
    "basecamp": CompanyEntry("basecamp.com", ("base camp",), "Collaboration"),
    "linear": CompanyEntry("linear.app", (), "Collaboration"),
    "miro": CompanyEntry("miro.com", (), "Collaboration"),
    "figma": CompanyEntry("figma.com", (), "Collaboration"),
    "canva": CompanyEntry("canva.com", (), "Collaboration"),

    # AI & ML
    "openai": CompanyEntry("openai.com", ("open ai", "chatgpt", "gpt"), "AI"),
    "anthropic": CompanyEntry("anthropic.com", ("claude",), "AI"),
    "google": CompanyEntry("google.com", (), "AI"),
    "deepmind": CompanyEntry("deepmind.google", ("deep mind",), "AI"),
    "huggingface": CompanyEntry("huggingface.co", ("hugging face", "hf"), "AI"),
    "cohere": CompanyEntry("cohere.com", (), "AI"),
    "replicate": CompanyEntry("replicate.com", (), "AI"),
    "stability": CompanyEntry("stability.ai", ("stable diffusion", "stability ai"), "AI"),
    "midjourney": CompanyEntry("midjourney.com", ("mid journey", "mj"), "AI"),
    "cursor": CompanyEntry("cursor.com", ("cursor ai",), "AI"),
    "perplexity": CompanyEntry("perplexity.ai", (), "AI"),
    "mistral": CompanyEntry("mistral.ai", ("mistral ai",), "AI"),
    "elevenlabs": CompanyEntry("elevenlabs.io", ("eleven labs", "11labs"), "AI"),

    # Analytics & Data
    "googleanalytics": CompanyEntry("analytics.google.com", ("google analytics", "ga"), "Analytics"),
    "mixpanel": CompanyEntry("mixpanel.com", ("mix panel",), "Analytics"),
    "amplitude": CompanyEntry("amplitude.com", (), "Analytics"),
    "segment": CompanyEntry("segment.com", (), "Analytics"),
    "hotjar": CompanyEntry("hotjar.com", ("hot jar",), "Analytics"),
    "looker": CompanyEntry("looker.com", (), "Analytics"),
    "tableau": CompanyEntry("tableau.com", (), "Analytics"),
    "powerbi": CompanyEntry("powerbi.microsoft.com", ("power bi", "microsoft power bi"), "Analytics"),
    "snowflake": CompanyEntry("snowflake.com", (), "Analytics"),
    "databricks": CompanyEntry("databricks.com", ("data bricks",), "Analytics"),
    "dbt": CompanyEntry("getdbt.com", ("data build tool",), "Analytics"),

    # Social Media
    "facebook": CompanyEntry("facebook.com", ("fb", "meta"), "Social"),
    "instagram": CompanyEntry("instagram.com", ("ig", "insta"), "Social"),
    "twitter": CompanyEntry("x.com", ("x", "x.com"), "Social"),
    "linkedin": CompanyEntry("linkedin.com", ("linked in", "li"), "Social"),
    "pinterest": CompanyEntry("pinterest.com", (), "Social"),
    "tiktok": CompanyEntry("tiktok.com", ("tik tok",), "Social"),
    "reddit": CompanyEntry("reddit.com", (), "Social"),
    "youtube": CompanyEntry("youtube.com", ("yt",), "Social"),
    "snapchat": CompanyEntry("snapchat.com", ("snap",), "Social"),
    "threads": CompanyEntry("threads.net", (), "Social"),

    # Auth & Security
    "auth0": CompanyEntry("auth0.com", (), "Auth"),
    "okta": CompanyEntry("okta.com", (), "Auth"),
    "clerk": CompanyEntry("clerk.com", (), "Auth"),
    "stytch": CompanyEntry("stytch.com", (), "Auth"),
    "onelogin": CompanyEntry("onelogin.com", ("one login",), "Auth"),
    "duo": CompanyEntry("duo.com", ("duo security",), "Auth"),
    "crowdstrike": CompanyEntry("crowdstrike.com", ("crowd strike",), "Security"),
    "snyk": CompanyEntry("snyk.io", (), "Security"),
    "vault": CompanyEntry("vaultproject.io", ("hashicorp vault",), "Security"),
    "onepassword": CompanyEntry("1password.com", ("1password",), "Security"),
    "lastpass": CompanyEntry("lastpass.com", ("last pass",), "Security"),

    # Design & UI
    "sketch": CompanyEntry("sketch.com", (), "Design"),
    "invision": CompanyEntry("invisionapp.com", ("in vision",), "Design"),
    "zeplin": CompanyEntry("zeplin.io", (), "Design"),
    "framer": CompanyEntry("framer.com", (), "Design"),
    "storybook": CompanyEntry("storybook.js.org", (), "Design"),
    "chromatic": CompanyEntry("chromatic.com", (), "Design"),
    "adobe": CompanyEntry("adobe.com", (), "Design"),
    "adobe xd": CompanyEntry("adobe.com", ("xd",), "Design"),

    # Frameworks & Languages
    "react": CompanyEntry("react.dev", ("reactjs",), "Framework"),
    "nextjs": CompanyEntry("nextjs.org", ("next.js", "next js", "next"), "Framework"),
    "vue": CompanyEntry("vuejs.org", ("vuejs", "vue.js"), "Framework"),
    "nuxt": CompanyEntry("nuxt.com", ("nuxtjs", "nuxt.js"), "Framework"),
    "angular": CompanyEntry("angular.io", ("angularjs",), "Framework"),
    "svelte": CompanyEntry("svelte.dev", ("sveltejs",), "Framework"),
    "remix": CompanyEntry("remix.run", ("remix.run",), "Framework"),
    "astro": CompanyEntry("astro.build", ("astro.build",), "Framework"),
    "tailwindcss": CompanyEntry("tailwindcss.com", ("tailwind", "tailwind css"), "Framework"),
    "bootstrap": CompanyEntry("getbootstrap.com", (), "Framework"),
    "nodejs": CompanyEntry("nodejs.org", ("node.js", "node js", "node"), "Framework"),
    "deno": CompanyEntry("deno.com", (), "Framework"),
    "bun": CompanyEntry("bun.sh", (), "Framework"),
    "python": CompanyEntry("python.org", (), "Language"),
    "rust": CompanyEntry("rust-lang.org", ("rustlang",), "Language"),
    "go": CompanyEntry("go.dev", ("golang",), "Language"),
    "swift": CompanyEntry("swift.org", (), "Language"),
    "kotlin": CompanyEntry("kotlinlang.org", ("kotlin lang",), "Language"),
    "typescript": CompanyEntry("typescriptlang.org", ("ts",), "Language"),
    "flutter": CompanyEntry("flutter.dev", (), "Framework"),
    "django": CompanyEntry("djangoproject.com", ("django project",), "Framework"),
    "flask": CompanyEntry("flask.palletsprojects.com", (), "Framework"),
    "fastapi": CompanyEntry("fastapi.tiangolo.com", ("fast api",), "Framework"),
    "rails": CompanyEntry("rubyonrails.org", ("ruby on rails", "ror"), "Framework"),
    "laravel": CompanyEntry("laravel.com", (), "Framework"),
    "spring": CompanyEntry("spring.io", ("spring boot",), "Framework"),
    "express": CompanyEntry("expressjs.com", ("express.js", "expressjs"), "Framework"),

    # Storage & CDN
    "s3": CompanyEntry("aws.amazon.com/s3", ("amazon s3", "aws s3"), "Storage"),
    "cloudinary": CompanyEntry("cloudinary.com", (), "Storage"),
    "imgix": CompanyEntry("imgix.com", (), "Storage"),
    "uploadcare": CompanyEntry("uploadcare.com", ("upload care",), "Storage"),
    "mux": CompanyEntry("mux.com", (), "Storage"),
    "bunnycdn": CompanyEntry("bunny.net", ("bunny cdn", "bunny.net"), "CDN"),
    "fastly": CompanyEntry("fastly.com", (), "CDN"),

    # CMS
    "wordpress": CompanyEntry("wordpress.org", ("wp",), "CMS"),
    "contentful": CompanyEntry("contentful.com", (), "CMS"),
    "strapi": CompanyEntry("strapi.io", (), "CMS"),
    "sanity": CompanyEntry("sanity.io", (), "CMS"),
    "ghost": CompanyEntry("ghost.org", (), "CMS"),
    "prismic": CompanyEntry("prismic.io", (), "CMS"),
    "webflow": CompanyEntry("webflow.com", ("web flow",), "CMS"),
    "drupal": CompanyEntry("drupal.org", (), "CMS"),
    "directus": CompanyEntry("directus.io", (), "CMS"),

    # ERP & Business
    "sap": CompanyEntry("sap.com", (), "ERP"),
    "oracle": CompanyEntry("oracle.com", (), "ERP"),
    "netsuite": CompanyEntry("netsuite.com", ("net suite",), "ERP"),
    "quickbooks": CompanyEntry("quickbooks.intuit.com", ("quick books", "intuit"), "ERP"),
    "xero": CompanyEntry("xero.com", (), "ERP"),
    "freshbooks": CompanyEntry("freshbooks.com", ("fresh books",), "ERP"),

    # Misc Popular
    "spotify": CompanyEntry("spotify.com", (), "Entertainment"),
    "netflix": CompanyEntry("netflix.com", (), "Entertainment"),
    "apple": CompanyEntry("apple.com", (), "Tech"),
    "microsoft": CompanyEntry("microsoft.com", ("ms",), "Tech"),
    "ibm": CompanyEntry("ibm.com", (), "Tech"),
    "intel": CompanyEntry("intel.com", (), "Tech"),
    "nvidia": CompanyEntry("nvidia.com", (), "Tech"),
    "tesla": CompanyEntry("tesla.com", (), "Tech"),
    "uber": CompanyEntry("uber.com", (), "Tech"),
    "airbnb": CompanyEntry("airbnb.com", (), "Tech"),
    "dropbox": CompanyEntry("dropbox.com", (), "Tech"),
    "box": CompanyEntry("box.com", (), "Tech"),
    "twitch": CompanyEntry("twitch.tv", (), "Entertainment"),
    "epic": CompanyEntry("epicgames.com", ("epic games",), "Entertainment"),
    "unity": CompanyEntry("unity.com", ("unity3d",), "DevTools"),
    "unreal": CompanyEntry("unrealengine.com", ("unreal engine", "ue"), "DevTools"),
    "godot": CompanyEntry("godotengine.org", ("godot engine",), "DevTools"),
}


def _check_keys(table: Mapping[str, CompanyEntry]) -> None:
    for key in table:
        if normalize_name(key) != key:
            raise ValueError(f"Company key is not normalized: {key!r}")


_check_keys(_COMPANIES)

COMPANY_DATABASE: Mapping[str, CompanyEntry] = MappingProxyType(_COMPANIES)

__all__ = ["CompanyEntry", "COMPANY_DATABASE"]
