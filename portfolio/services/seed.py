import logging
from datetime import timedelta

from portfolio.config import Settings
from portfolio.schemas import BlogCreate, UserCreate, utcnow
from portfolio.storage.base import Storage

logger = logging.getLogger(__name__)

SAMPLE_BLOGS = [
    {
        "days_ago": 7,
        "blog": BlogCreate(
            title="Getting Started with Data Analysis in Python",
            slug="getting-started-with-data-analysis-python",
            content=(
                "Python has become the go-to language for data analysis and data science. "
                "In this post we look at the fundamental libraries and techniques to get started.\n\n"
                "1. **NumPy** - numerical operations and multi-dimensional arrays\n"
                "2. **Pandas** - data manipulation and analysis\n"
                "3. **Matplotlib** - data visualization\n"
                "4. **Seaborn** - statistical data visualization\n\n"
                "```python\nimport pandas as pd\n\ndf = pd.read_csv('data.csv')\n"
                "print(df.head())\nprint(df.describe())\nprint(df.isnull().sum())\n```\n\n"
                "In future posts we'll dive deeper into cleaning, visualization and machine learning."
            ),
            excerpt=(
                "Learn the essentials of data analysis with Python, focusing on key libraries like "
                "NumPy, Pandas, Matplotlib, and Seaborn with practical examples."
            ),
            tags="Python,Data Analysis,Pandas,Beginner",
            cover_image="https://images.unsplash.com/photo-1507842217343-583bb7270b66?q=80&w=2400&auto=format&fit=crop",
            published=True,
        ),
    },
    {
        "days_ago": 3,
        "blog": BlogCreate(
            title="Web Scraping Techniques for Data Collection",
            slug="web-scraping-techniques-data-collection",
            content=(
                "Web scraping is a powerful technique for gathering data when APIs aren't available.\n\n"
                "## Ethical Web Scraping Guidelines\n\n"
                "1. Check robots.txt and the terms of service\n"
                "2. Keep request rates reasonable\n"
                "3. Identify your scraper with a proper user-agent\n"
                "4. Cache results to minimize requests\n\n"
                "## Popular Python Libraries\n\n"
                "BeautifulSoup for parsing HTML, Scrapy for full crawls, and Selenium for "
                "pages that render with JavaScript."
            ),
            excerpt=(
                "Discover ethical web scraping techniques and tools for effective data collection, "
                "with examples using BeautifulSoup, Scrapy, and Selenium in Python."
            ),
            tags="Web Scraping,Python,Data Collection,BeautifulSoup",
            cover_image="https://images.unsplash.com/photo-1558494949-ef010cbdcc31?q=80&w=2400&auto=format&fit=crop",
            published=True,
        ),
    },
]


def seed_admin(storage: Storage, settings: Settings):
    """Create the admin account from ADMIN_USERNAME / ADMIN_PASSWORD if missing."""
    if storage.get_user_by_username(settings.admin_username):
        return None

    if not settings.admin_password:
        logger.warning("ADMIN_PASSWORD is not set; no admin account was created")
        return None

    user = storage.create_user(
        UserCreate(username=settings.admin_username, password=settings.admin_password, is_admin=True)
    )
    logger.info("Created admin user '%s'", user.username)
    return user


def seed_sample_blogs(storage: Storage) -> int:
    created = 0
    for sample in SAMPLE_BLOGS:
        blog = sample["blog"]
        if storage.get_blog_by_slug(blog.slug):
            continue
        storage.create_blog(blog, created_at=utcnow() - timedelta(days=sample["days_ago"]))
        created += 1
    return created


def seed_defaults(storage: Storage, settings: Settings, with_samples: bool = False) -> None:
    seed_admin(storage, settings)
    if with_samples:
        created = seed_sample_blogs(storage)
        if created:
            logger.info("Seeded %d sample blog posts", created)
