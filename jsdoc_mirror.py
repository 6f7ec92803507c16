#!/usr/bin/env python3
"""
JSDoc Mirror - Offline copy of a Docusaurus documentation site

This script reads the navigation menu of a documentation website, downloads
every article, keeps only the rendered markdown block, rewrites internal
links to local hashed filenames and writes a JSON index plus a README.

Usage:
    python jsdoc_mirror.py
    python jsdoc_mirror.py dist --limit 10
"""

import sys
import argparse
import hashlib
import html
import json
import time
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple
import logging
from datetime import datetime
import re
import os

# Third-party imports (need to be installed)
try:
    import requests
    from bs4 import BeautifulSoup
    from tqdm import tqdm
except ImportError as e:
    print(f"Missing required package: {e}")
    print("Install required packages with:")
    print("pip install requests beautifulsoup4 tqdm")
    sys.exit(1)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = 'https://www.jsdoc.com.cn'

MENU_LINK_RE = re.compile(r'<a class="menu__link[^"]*?" [^>]*?tabindex="0" href="(.*?)">(.*?)</a>')
CONTROL_CHARS_RE = re.compile(r'[\x00-\x1f\x7f-\x9f]')
CONTENT_RE = re.compile(r'<div class="theme-doc-markdown markdown">([\s\S]*?)</article>')
SUMMARY_RE = re.compile(
    r'<h2[^>]*? id="(概述|介绍)"[^>]*>\1(?:<a [^>]*>.*?</a>)?</h2>([\s\S]*?)<h2'
)
COPY_BUTTON_RE = re.compile(r'<div class="buttonGroup__atx">.*?</div>')
HREF_RE = re.compile(r'<a[^>\n]+?href="([^"\n]+?)"')
ABSOLUTE_URL_RE = re.compile(r'^https?://', re.IGNORECASE)
CODE_BLOCK_RE = re.compile(r'<pre><code class="lang-[^"]*?">')

DOCUMENT_TEMPLATE = (
    '<!DOCTYPE html><html lang="zh_CN"><head><meta charset="UTF-8">'
    '<title>{title}</title><link rel="stylesheet" href="{stylesheet}" /></head> '
    '<body>{body}</body></html>'
)


class FetchError(Exception):
    """A GET request failed at the transport level or with a non-2xx status."""

    def __init__(self, url: str, status: Optional[int] = None, cause: Optional[Exception] = None):
        self.url = url
        self.status = status
        self.cause = cause
        if status is not None:
            reason = f"HTTP {status}"
        elif cause is not None:
            reason = str(cause)
        else:
            reason = "request failed"
        super().__init__(f"Error fetching {url}: {reason}")


class ArticleFetchError(FetchError):
    """Fetching a single article failed."""


class ContentNotFoundError(Exception):
    """The article page has no rendered markdown block."""

    def __init__(self, url: str):
        self.url = url
        super().__init__(f"No article content found at {url}")


@dataclass
class LinkItem:
    title: str
    url: str


@dataclass
class ArticleInfo:
    title: str
    path: str
    summary: str

    def to_index(self) -> Dict[str, str]:
        """Persisted form used in indexes.json."""
        return {'t': self.title, 'p': self.path, 'd': self.summary}


def url_key(url: str) -> str:
    """Stable local filename (without extension) for a URL."""
    return hashlib.md5(url.encode('utf-8')).hexdigest()


def strip_control_chars(text: str) -> str:
    """Remove C0 and C1 control characters."""
    return CONTROL_CHARS_RE.sub('', text)


def remove_html_tag(fragment: str) -> str:
    """Plain text of an HTML fragment."""
    return BeautifulSoup(fragment, 'html.parser').get_text().strip()


def parse_links(page_html: str) -> List[LinkItem]:
    """Extract menu links from the site root, in document order."""
    links = []
    for match in MENU_LINK_RE.finditer(page_html):
        links.append(LinkItem(title=strip_control_chars(match.group(2)), url=match.group(1)))
    return links


def get_doc_summary(doc_html: str) -> str:
    """Text of the "概述" or "介绍" section, or an empty string.

    The section runs from its <h2> heading up to the next <h2>.
    """
    match = SUMMARY_RE.search(doc_html)
    if not match:
        return ''
    return remove_html_tag(match.group(2))


def build_document(body: str, title: str = '', stylesheet: str = '../doc.css') -> str:
    """Wrap a content fragment in a standalone HTML document."""
    return DOCUMENT_TEMPLATE.format(
        title=html.escape(title),
        stylesheet=html.escape(stylesheet, quote=True),
        body=body,
    )


def remove_copy_buttons(doc_html: str) -> str:
    return COPY_BUTTON_RE.sub('', doc_html)


def rewrite_links(doc_html: str) -> str:
    """Point internal links at the local hashed files.

    Absolute http(s) links and in-page anchors are left as they are. The
    replacement is a literal string substitution of ``href="<original>"``.
    """
    for original in dict.fromkeys(HREF_RE.findall(doc_html)):
        target = original.strip()
        if ABSOLUTE_URL_RE.match(target) or target.startswith('#'):
            continue

        anchor = ''
        if '#' in target:
            target, anchor = target[:target.index('#')], target[target.index('#'):]

        local_file = url_key(target)
        doc_html = doc_html.replace(f'href="{original}"', f'href="{local_file}.html{anchor}"')
        logger.debug(f"Rewrote link {original} -> {local_file}.html{anchor}")
    return doc_html


def normalize_code_blocks(doc_html: str, lang: str = 'js') -> str:
    """Declare the same highlighter language on every code block."""
    return CODE_BLOCK_RE.sub(f'<pre><code class="lang-{lang}">', doc_html)


def save_index(indexes: List[ArticleInfo], index_path: str):
    """Write the JSON index of processed articles."""
    logger.info(f"Saving index of {len(indexes)} articles to {index_path}")
    with open(index_path, 'w', encoding='utf-8') as f:
        json.dump([info.to_index() for info in indexes], f, ensure_ascii=False, separators=(',', ':'))


def save_readme(indexes: List[ArticleInfo], readme_path: str, source_url: str):
    """Write a README listing every mirrored article."""
    with open(readme_path, 'w', encoding='utf-8') as f:
        f.write("# Documentation Mirror\n\n")
        f.write(f"**Source Website:** {source_url}\n")
        f.write(f"**Generated:** {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}\n")
        f.write(f"**Documents:** {len(indexes)}\n\n")

        f.write("## Contents\n\n")
        for i, info in enumerate(indexes, 1):
            f.write(f"{i}. [{info.title}]({info.path})\n")
            if info.summary:
                # Markdown list continuation needs the summary on one line
                summary = ' '.join(info.summary.split())
                f.write(f"   {summary}\n")

    logger.info(f"Saved README to {readme_path}")


class DocsMirror:
    """Mirror every article listed in a documentation site's menu."""

    def __init__(self, base_url: str = DEFAULT_BASE_URL, output_dir: str = 'dist',
                 timeout: Optional[float] = 30, delay: float = 0.0,
                 code_lang: str = 'js', stylesheet: str = '../doc.css'):
        """Initialize the mirror."""
        self.base_url = base_url.rstrip('/')
        self.output_dir = output_dir
        self.docs_dir = os.path.join(output_dir, 'docs')
        self.timeout = timeout
        self.delay = delay
        self.code_lang = code_lang
        self.stylesheet = stylesheet
        self.session = requests.Session()
        self.session.headers.update({
            'User-Agent': 'Mozilla/5.0 (compatible; JSDocMirror/1.0)'
        })

    def http_get(self, url: str) -> str:
        """GET a URL and return its body decoded as UTF-8."""
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            raise FetchError(url, cause=e) from e

        if not 200 <= response.status_code < 300:
            raise FetchError(url, status=response.status_code)

        response.encoding = 'utf-8'
        return response.text

    def get_links(self) -> List[LinkItem]:
        """Fetch the site root and list its menu links."""
        logger.info(f"Fetching link list from {self.base_url}")
        links = parse_links(self.http_get(self.base_url))
        logger.info(f"Found {len(links)} links")
        return links

    def get_article(self, item: LinkItem) -> ArticleInfo:
        """Download one article, write its local copy and describe it."""
        url = self.base_url + item.url
        try:
            page = self.http_get(url)
        except FetchError as e:
            raise ArticleFetchError(e.url, status=e.status, cause=e.cause) from e

        match = CONTENT_RE.search(page)
        if not match:
            raise ContentNotFoundError(url)

        doc_html = match.group(1)
        summary = get_doc_summary(doc_html)
        doc_html = build_document(doc_html, title=item.title, stylesheet=self.stylesheet)
        doc_html = remove_copy_buttons(doc_html)
        doc_html = rewrite_links(doc_html)
        doc_html = normalize_code_blocks(doc_html, self.code_lang)

        # Outbound names use the lower-cased URL, inbound links do not
        filename = url_key(item.url.lower()) + '.html'
        os.makedirs(self.docs_dir, exist_ok=True)
        with open(os.path.join(self.docs_dir, filename), 'w', encoding='utf-8') as f:
            f.write(doc_html)
        logger.debug(f"Saved {item.url} to docs/{filename}")

        return ArticleInfo(title=item.title, path='docs/' + filename, summary=summary)

    def process_site(self, limit: Optional[int] = None) -> Tuple[int, int]:
        """Mirror the whole site: list links, fetch articles, write index and README."""
        links = self.get_links()

        if limit is not None:
            links = links[:limit]
            logger.info(f"Processing limited to {limit} links")

        os.makedirs(self.docs_dir, exist_ok=True)

        indexes: List[ArticleInfo] = []
        failed = 0
        width = len(str(len(links)))

        for i, item in enumerate(tqdm(links, desc="Mirroring articles"), 1):
            prefix = f"[{str(i).zfill(width)}/{len(links)}]"
            try:
                indexes.append(self.get_article(item))
                logger.debug(f"{prefix} {item.title} done")
            except Exception as e:
                failed += 1
                logger.warning(f"{prefix} {item.title} ({item.url}): {e}")
            finally:
                if self.delay:
                    time.sleep(self.delay)

        save_index(indexes, os.path.join(self.docs_dir, 'indexes.json'))
        save_readme(indexes, os.path.join(self.output_dir, 'README.md'), self.base_url)

        return len(indexes), failed


def main():
    """Main execution function."""
    parser = argparse.ArgumentParser(
        description='Mirror a documentation website into standalone HTML files with a JSON index'
    )
    parser.add_argument(
        'output',
        nargs='?',
        default='dist',
        help='Output directory path (default: dist)'
    )
    parser.add_argument(
        '--base-url',
        default=DEFAULT_BASE_URL,
        help=f'Documentation site origin (default: {DEFAULT_BASE_URL})'
    )
    parser.add_argument(
        '--timeout',
        type=float,
        default=30,
        help='Request timeout in seconds (default: 30)'
    )
    parser.add_argument(
        '--delay',
        type=float,
        default=0.0,
        help='Delay between article requests in seconds (default: 0)'
    )
    parser.add_argument(
        '--limit',
        type=int,
        default=None,
        help='Limit number of articles to process'
    )
    parser.add_argument(
        '--code-lang',
        default='js',
        help='Language declared on every code block (default: js)'
    )
    parser.add_argument(
        '--stylesheet',
        default='../doc.css',
        help='Stylesheet href used by every article (default: ../doc.css)'
    )
    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Enable verbose logging'
    )

    args = parser.parse_args()

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    mirror = DocsMirror(
        base_url=args.base_url,
        output_dir=args.output,
        timeout=args.timeout,
        delay=args.delay,
        code_lang=args.code_lang,
        stylesheet=args.stylesheet,
    )

    try:
        print(f"\n📚 Mirroring documentation: {mirror.base_url}")
        print(f"📁 Output directory: {args.output}")

        successful, failed = mirror.process_site(limit=args.limit)

        print(f"\n✅ Mirroring complete!")
        print(f"📊 Summary:")
        print(f"   - Successful: {successful}")
        print(f"   - Failed: {failed}")
        print(f"📋 Index saved to: {os.path.join(mirror.docs_dir, 'indexes.json')}")
        print(f"📄 README saved to: {os.path.join(args.output, 'README.md')}")

    except KeyboardInterrupt:
        print("\n⚠️ Processing interrupted by user")
        sys.exit(1)
    except Exception as e:
        logger.error(f"Fatal error: {e}")
        print(f"\n❌ Error: {e}")
        sys.exit(1)

    sys.exit(0)


if __name__ == '__main__':
    main()
