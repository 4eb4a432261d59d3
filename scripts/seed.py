"""Database seeder for local development of the marketplace API."""
import asyncio
import argparse
import random
import time

from market.database import engine, async_session, Base
from market.models import Article, ArticleLike, Comment, Product, ProductLike, User
from market.passwords import password_hasher

TAGS = ["electronics", "books", "furniture", "kids", "sports", "fashion",
        "kitchen", "garden", "games", "music"]

# Every seeded account shares this password.
SEED_PASSWORD = "password1234"


async def seed(small: bool = False):
    num_users = 5 if small else 30
    num_articles = 20 if small else 500
    num_products = 20 if small else 500
    max_comments = 3 if small else 15

    print(f"Seeding: {num_users} users, {num_articles} articles, {num_products} products")
    start = time.perf_counter()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    # One hash for all users; bcrypt is slow by design.
    password_hash = password_hasher.hash(SEED_PASSWORD)

    async with async_session() as session:
        users = []
        for i in range(num_users):
            user = User(
                email=f"user{i:03d}@example.com",
                nickname=f"user{i:03d}",
                password=password_hash,
            )
            session.add(user)
            users.append(user)
        await session.flush()
        print(f"  Created {len(users)} users")

        articles = []
        for i in range(num_articles):
            article = Article(
                title=f"Trading tip #{i}: {random.choice(TAGS)}",
                content=f"Notes on buying and selling second-hand {random.choice(TAGS)}. " * 5,
                user_id=random.choice(users).id,
            )
            session.add(article)
            articles.append(article)

        products = []
        for i in range(num_products):
            product = Product(
                name=f"Used item {i}",
                description=f"Gently used, category {random.choice(TAGS)}.",
                price=random.randint(1, 500) * 1000,
                tags=random.sample(TAGS, k=random.randint(1, 3)),
                images=[],
                user_id=random.choice(users).id,
            )
            session.add(product)
            products.append(product)
        await session.flush()
        print(f"  Created {len(articles)} articles and {len(products)} products")

        total_comments = 0
        for parent in articles + products:
            for _ in range(random.randint(0, max_comments)):
                comment = Comment(
                    content="Is this still available?",
                    user_id=random.choice(users).id,
                )
                if isinstance(parent, Article):
                    comment.article_id = parent.id
                else:
                    comment.product_id = parent.id
                session.add(comment)
                total_comments += 1

        total_likes = 0
        for user in users:
            for article in random.sample(articles, k=min(5, len(articles))):
                session.add(ArticleLike(user_id=user.id, article_id=article.id))
                total_likes += 1
            for product in random.sample(products, k=min(5, len(products))):
                session.add(ProductLike(user_id=user.id, product_id=product.id))
                total_likes += 1

        await session.commit()

    elapsed = time.perf_counter() - start
    print(f"\nSeeding complete in {elapsed:.1f}s")
    print(f"  Comments: {total_comments}")
    print(f"  Likes: {total_likes}")
    print(f"  Login with any userNNN@example.com / {SEED_PASSWORD}")


def main():
    parser = argparse.ArgumentParser(description="Seed the marketplace database")
    parser.add_argument("--small", action="store_true", help="Use a small dataset")
    args = parser.parse_args()
    asyncio.run(seed(small=args.small))


if __name__ == "__main__":
    main()
