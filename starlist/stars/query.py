"""GraphQL query used to page through the viewer's starred repositories."""

from __future__ import annotations

PAGE_SIZE = 40
LANGUAGE_LIMIT = 5
TOPIC_LIMIT = 20

STARRED_REPOSITORIES_QUERY = f"""query GetViewerStargazers($cursor: String) {{
  viewer {{
    login

    starredRepositories(first: {PAGE_SIZE}, after: $cursor) {{
      isOverLimit
      totalCount

      pageInfo {{ endCursor hasNextPage }}

      edges {{
        node {{
          archivedAt
          description
          forkCount
          homepageUrl
          url
          isFork
          isPrivate
          isTemplate

          languages(first: {LANGUAGE_LIMIT}, orderBy: {{ direction: DESC, field: SIZE }}) {{
            edges {{
              node {{
                name
              }}
              size
            }}

            totalCount
            totalSize
          }}

          latestRelease {{ name publishedAt }}
          licenseInfo {{ nickname spdxId }}
          nameWithOwner
          parent {{ nameWithOwner }}
          pushedAt

          repositoryTopics(first: {TOPIC_LIMIT}) {{
            totalCount
            nodes {{
              topic {{ name }}
              url
            }}
          }}

          stargazerCount
        }}

        starredAt
      }}
    }}
  }}
}}"""
