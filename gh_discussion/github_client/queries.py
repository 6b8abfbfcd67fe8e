"""GraphQL documents sent to the GitHub API."""

_LIST_NODE_FIELDS = """
    id
    number
    title
    bodyText
    createdAt
    updatedAt
    author {
      login
      url
    }
    category {
      name
    }
    url
    answerChosenAt
    isAnswered
    comments(first: 0) {
      totalCount
    }
    labels(first: 10) {
      nodes {
        name
        color
      }
    }
"""

_ACTOR_FIELDS = """
      login
      url
      avatarUrl
      ... on User {
        name
        email
      }
"""

LIST_DISCUSSIONS_QUERY = (
    """
query ListDiscussions($owner: String!, $repo: String!, $first: Int!, $after: String,
                      $orderBy: DiscussionOrder, $categoryId: ID, $answered: Boolean) {
  repository(owner: $owner, name: $repo) {
    discussions(first: $first, after: $after, orderBy: $orderBy,
                categoryId: $categoryId, answered: $answered) {
      totalCount
      pageInfo {
        hasNextPage
        endCursor
      }
      nodes {"""
    + _LIST_NODE_FIELDS
    + """
      }
    }
  }
}
"""
)

SEARCH_DISCUSSIONS_QUERY = (
    """
query SearchDiscussions($query: String!, $first: Int!, $after: String) {
  search(type: DISCUSSION, query: $query, first: $first, after: $after) {
    discussionCount
    pageInfo {
      hasNextPage
      endCursor
    }
    nodes {
      ... on Discussion {"""
    + _LIST_NODE_FIELDS
    + """
        repository {
          nameWithOwner
        }
      }
    }
  }
}
"""
)

GET_DISCUSSION_QUERY = f"""
query GetDiscussion($owner: String!, $repo: String!, $number: Int!,
                    $includeComments: Boolean!) {{
  repository(owner: $owner, name: $repo) {{
    discussion(number: $number) {{
      id
      number
      title
      body
      bodyText
      bodyHTML
      createdAt
      updatedAt
      publishedAt
      lastEditedAt
      author {{{_ACTOR_FIELDS}      }}
      category {{
        id
        name
        description
        emoji
        emojiHTML
        isAnswerable
      }}
      repository {{
        nameWithOwner
        url
        description
      }}
      labels(first: 10) {{
        nodes {{
          name
          color
        }}
      }}
      url
      resourcePath
      locked
      activeLockReason
      answerChosenAt
      answerChosenBy {{{_ACTOR_FIELDS}      }}
      answer {{
        id
        body
        bodyText
        createdAt
        author {{{_ACTOR_FIELDS}        }}
        isAnswer
      }}
      isAnswered
      upvoteCount
      reactionGroups {{
        content
        users {{
          totalCount
        }}
      }}
      viewerCanDelete
      viewerCanReact
      viewerCanSubscribe
      viewerCanUpdate
      viewerDidAuthor
      viewerSubscription
      authorAssociation
      createdViaEmail
      databaseId
      editor {{{_ACTOR_FIELDS}      }}
      includesCreatedEdit
      comments(first: 100) @include(if: $includeComments) {{
        totalCount
        pageInfo {{
          hasNextPage
          endCursor
        }}
        nodes {{
          id
          body
          bodyText
          bodyHTML
          createdAt
          updatedAt
          publishedAt
          author {{{_ACTOR_FIELDS}          }}
          authorAssociation
          upvoteCount
          isAnswer
          isMinimized
          minimizedReason
          reactionGroups {{
            content
            users {{
              totalCount
            }}
          }}
          url
          viewerCanMarkAsAnswer
          viewerCanUnmarkAsAnswer
          replies(first: 50) {{
            totalCount
            nodes {{
              id
              body
              bodyText
              createdAt
              updatedAt
              author {{{_ACTOR_FIELDS}              }}
              authorAssociation
              isAnswer
              url
            }}
          }}
        }}
      }}
    }}
  }}
}}
"""

GET_REPOSITORY_QUERY = """
query GetRepository($owner: String!, $repo: String!) {
  repository(owner: $owner, name: $repo) {
    id
    name
    nameWithOwner
    owner {
      login
      url
    }
    url
    description
  }
}
"""

GET_DISCUSSION_CATEGORIES_QUERY = """
query GetDiscussionCategories($owner: String!, $repo: String!) {
  repository(owner: $owner, name: $repo) {
    discussionCategories(first: 100) {
      nodes {
        id
        name
        description
        emoji
        emojiHTML
        isAnswerable
        createdAt
        updatedAt
      }
    }
  }
}
"""
