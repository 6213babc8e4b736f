"""Tests for page-property assertion chains."""

import pytest

from splurge_cypress_to_playwright.syntax.tree import parse_source, walk
from splurge_cypress_to_playwright.transformers.chain import decompose
from splurge_cypress_to_playwright.transformers.special_chains import interpret_special_chain


def _chain(code: str):
    tree = parse_source(code)
    outer = next(node for node in walk(tree.root) if node.type == "call_expression")
    return decompose(outer)


@pytest.mark.parametrize(
    "code, expected",
    [
        ("cy.url().should('eq', 'http://localhost/')", "await expect(page).toHaveURL('http://localhost/')"),
        ("cy.url().should('include', '/dashboard')", "await expect(page).toHaveURL(/\\/dashboard/)"),
        ("cy.url().should('not.contain', '/login')", "await expect(page).not.toHaveURL(/\\/login/)"),
        ("cy.url().should('match', /items\\/\\d+/)", "await expect(page).toHaveURL(/items\\/\\d+/)"),
        ("cy.url().should('include', '?page=2')", "await expect(page).toHaveURL(/\\?page=2/)"),
        ("cy.title().should('eq', 'Home')", "await expect(page).toHaveTitle('Home')"),
        ("cy.title().should('include', 'Shop')", "await expect(page).toHaveTitle(/Shop/)"),
        ("cy.hash().should('eq', '#top')", "expect(new URL(page.url()).hash).toBe('#top')"),
        ("cy.location('pathname').should('eq', '/a')", "expect(new URL(page.url()).pathname).toBe('/a')"),
        ("cy.location('search').should('contain', 'q=1')", "expect(new URL(page.url()).search).toContain('q=1')"),
        ("cy.location().its('host').should('eq', 'x.io')", "expect(new URL(page.url()).host).toBe('x.io')"),
        ("cy.url().should('exist')", "expect(page.url()).toBeDefined()"),
    ],
)
def test_page_assertions(code, expected):
    assert interpret_special_chain(_chain(code)) == expected


def test_several_assertions_share_the_indent():
    chain = _chain("cy.title().should('eq', 'Home').and('not.contain', 'Error')")

    result = interpret_special_chain(chain, "    ")

    assert result == "await expect(page).toHaveTitle('Home');\n    await expect(page).not.toHaveTitle(/Error/)"


def test_unsupported_keyword_becomes_todo():
    result = interpret_special_chain(_chain("cy.url().should('be.a', 'string')"))

    assert result == "// TODO: Migrate cy.url().should('be.a', 'string') - unsupported page assertion"


@pytest.mark.parametrize(
    "code",
    [
        "cy.url()",
        "cy.url().then((url) => url)",
        "cy.url().should((url) => expect(url).to.contain('a'))",
        "cy.location(part).should('eq', '/')",
        "cy.location('pathname').its('length').should('eq', 2)",
        "cy.get('a').should('be.visible')",
        "cy.title('x').should('eq', 'y')",
    ],
)
def test_declined_chains(code):
    assert interpret_special_chain(_chain(code)) is None


def test_empty_chain():
    assert interpret_special_chain([]) is None
